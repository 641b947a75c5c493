# Replacement for autoconf's test programs.
# Builds a small program with the configured toolchain and reduces the
# outcome to a boolean, or to the text the program printed.

from executils import captureStdout, runProgram
from sourcegen import EnvironmentFailure, TempSource

from collections import namedtuple
from os.path import abspath

class Depth(object):
	'''How far a probe proceeds. Later stages compare greater than earlier
	ones.
	'''
	COMPILE = 1
	LINK = 2
	RUN = 3
	RUN_CAPTURE = 4

	names = {
		COMPILE: 'compile',
		LINK: 'link',
		RUN: 'run',
		RUN_CAPTURE: 'run and capture output',
		}

ProbeResult = namedtuple('ProbeResult', ('success', 'output'))

def _compileArguments(toolchain, source, depth):
	compileCommand = toolchain.compileCommand()
	if depth >= Depth.LINK and toolchain.combinesStages():
		# The compiler can produce the executable in one go.
		return compileCommand.arguments(
			source.sourcePath, source.executablePath,
			toolchain.compilerOutputFlag,
			trailingFlags = toolchain.linkFlags
			)
	else:
		return compileCommand.arguments(
			source.sourcePath, source.objectPath,
			toolchain.compilerOutputFlag, toolchain.compileOnlyFlag
			)

def _describeCompile(toolchain, depth):
	'''Returns a function that gives the compile stage invocation for a
	probe source, for recording in the source banner.
	'''
	return lambda source: toolchain.compileCommand().describe(
		_compileArguments(toolchain, source, depth)
		)

def _build(log, toolchain, source, depth):
	'''Runs the compile stage and, if the depth asks for it, the link stage.
	Returns True iff all stages that were run succeeded.
	'''
	if not toolchain.compileCommand().run(
		log, _compileArguments(toolchain, source, depth)
		):
		return False
	if depth == Depth.COMPILE or toolchain.combinesStages():
		return True
	return toolchain.linkCommand().link(
		log, [ source.objectPath ], source.executablePath,
		toolchain.linkerOutputFlag
		)

def executeProbe(log, toolchain, lines, depth, directory = None):
	'''Writes the program defined by "lines" to a temporary source file and
	builds it with the given toolchain, up to the given depth. For the run
	depths the resulting executable is run as well.
	Flags that turn warnings into errors are ignored.
	Returns a ProbeResult; its output is the text the program wrote to
	stdout if the depth is Depth.RUN_CAPTURE and the probe succeeded,
	None otherwise. A failing compile, link or run is not an error.
	Raises EnvironmentFailure if the probe cannot be performed at all.
	'''
	if depth not in Depth.names:
		raise ValueError('Invalid probe depth: %r' % (depth, ))
	toolchain = toolchain.sanitized()
	if toolchain.locate() is None:
		raise EnvironmentFailure(
			'Toolchain executable "%s" not found' % toolchain.executable
			)

	with TempSource(
		lines, toolchain, _describeCompile(toolchain, depth), directory
		) as source:
		ok = _build(log, toolchain, source, depth)
		output = None
		if ok and depth == Depth.RUN:
			ok = runProgram(
				log, [ abspath(source.executablePath) ], toolchain.env
				)
		elif ok and depth == Depth.RUN_CAPTURE:
			output = captureStdout(
				log, [ abspath(source.executablePath) ], toolchain.env
				)
			ok = output is not None
	print('Probe (%s) %s' % (
		Depth.names[depth],
		'succeeded' if ok else 'failed'
		), file=log)
	return ProbeResult(ok, output)

def tryCompile(log, toolchain, lines):
	'''Returns True iff the program compiles.
	'''
	return executeProbe(log, toolchain, lines, Depth.COMPILE).success

def tryLink(log, toolchain, lines):
	'''Returns True iff the program compiles and links.
	'''
	return executeProbe(log, toolchain, lines, Depth.LINK).success

def tryRun(log, toolchain, lines):
	'''Returns True iff the program can be built and exits with status 0.
	'''
	return executeProbe(log, toolchain, lines, Depth.RUN).success

def tryRunCapture(log, toolchain, lines):
	'''Builds and runs the program.
	Returns what it wrote to stdout, or None if building or running failed.
	'''
	return executeProbe(log, toolchain, lines, Depth.RUN_CAPTURE).output
