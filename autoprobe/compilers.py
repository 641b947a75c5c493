# Describes the toolchain that probes are built with and the commands that
# run its compile and link stages.

from executils import logOutput, mergeEnv, shjoin, splitCommandLine
from flags import sanitizeFlags

from os import environ as osEnviron
from shlex import split as shsplit
from shutil import which
from subprocess import PIPE, STDOUT, Popen
import sys

if sys.platform in ('win32', 'cygwin', 'msys'):
	defaultExecutableSuffix = '.exe'
else:
	defaultExecutableSuffix = ''

if sys.platform == 'win32':
	defaultObjectSuffix = '.obj'
else:
	defaultObjectSuffix = '.o'

def outputArgs(outputFlag, path):
	'''Returns the arguments that name an output file.
	Flags ending in ":" or "=" and MSVC style "/F?" flags are glued to the
	path, other flags are passed as a separate argument.
	'''
	if outputFlag.endswith((':', '=')) or outputFlag.startswith('/'):
		return [ outputFlag + path ]
	else:
		return [ outputFlag, path ]

class Toolchain(object):
	'''Standing configuration for building probes: which compiler to run and
	with what flags. Instances are not modified after construction; the
	with*() methods return derived toolchains.
	'''

	def __init__(
		self, executable,
		baseFlags = (), includePaths = (), linkFlags = (), env = None,
		executableSuffix = defaultExecutableSuffix,
		objectSuffix = defaultObjectSuffix, sourceSuffix = '.c',
		compilerOutputFlag = '-o', linkerOutputFlag = '-o',
		compileOnlyFlag = '-c', includeFlag = '-I'
		):
		if not executable:
			raise ValueError('No toolchain executable specified')
		self.__executable = executable
		self.__baseFlags = tuple(baseFlags)
		self.__includePaths = tuple(includePaths)
		self.__linkFlags = tuple(linkFlags)
		self.__env = dict(env or {})
		self.__executableSuffix = executableSuffix
		self.__objectSuffix = objectSuffix
		self.__sourceSuffix = sourceSuffix
		self.__compilerOutputFlag = compilerOutputFlag
		self.__linkerOutputFlag = linkerOutputFlag
		self.__compileOnlyFlag = compileOnlyFlag
		self.__includeFlag = includeFlag

	@classmethod
	def fromLine(cls, commandStr, flagsStr = '', linkFlagsStr = '', **kwargs):
		'''Creates a toolchain from a compile command line such as
		"CCACHE_DIR=/tmp/cc gcc -m64", plus compile and link flags strings.
		Raises ValueError if the command line does not name a command.
		'''
		env, commandParts = splitCommandLine(commandStr)
		return cls(
			commandParts[0],
			baseFlags = commandParts[1 : ] + shsplit(flagsStr),
			linkFlags = shsplit(linkFlagsStr),
			env = env,
			**kwargs
			)

	@classmethod
	def fromEnvironment(cls, environ = None, **kwargs):
		'''Creates a toolchain from the conventional CC, CFLAGS, CPPFLAGS,
		LDFLAGS and LIBS environment variables.
		'''
		if environ is None:
			environ = osEnviron
		return cls.fromLine(
			environ.get('CC') or 'cc',
			' '.join((environ.get('CPPFLAGS', ''), environ.get('CFLAGS', ''))),
			' '.join((environ.get('LDFLAGS', ''), environ.get('LIBS', ''))),
			**kwargs
			)

	def __derive(self, **changes):
		fields = dict(
			executable = self.__executable,
			baseFlags = self.__baseFlags,
			includePaths = self.__includePaths,
			linkFlags = self.__linkFlags,
			env = self.__env,
			executableSuffix = self.__executableSuffix,
			objectSuffix = self.__objectSuffix,
			sourceSuffix = self.__sourceSuffix,
			compilerOutputFlag = self.__compilerOutputFlag,
			linkerOutputFlag = self.__linkerOutputFlag,
			compileOnlyFlag = self.__compileOnlyFlag,
			includeFlag = self.__includeFlag,
			)
		fields.update(changes)
		return Toolchain(**fields)

	def withLinkFlags(self, flags):
		'''Returns a toolchain that passes the given flags to the linker in
		addition to the current link flags.
		'''
		return self.__derive(linkFlags = self.__linkFlags + tuple(flags))

	def withIncludePaths(self, paths):
		return self.__derive(includePaths = self.__includePaths + tuple(paths))

	def sanitized(self):
		'''Returns a toolchain with all "warnings are errors" flags removed
		from both the compile and the link flags.
		'''
		return self.__derive(
			baseFlags = sanitizeFlags(self.__baseFlags),
			linkFlags = sanitizeFlags(self.__linkFlags),
			)

	executable = property(lambda self: self.__executable)
	baseFlags = property(lambda self: self.__baseFlags)
	includePaths = property(lambda self: self.__includePaths)
	linkFlags = property(lambda self: self.__linkFlags)
	env = property(lambda self: dict(self.__env))
	executableSuffix = property(lambda self: self.__executableSuffix)
	objectSuffix = property(lambda self: self.__objectSuffix)
	sourceSuffix = property(lambda self: self.__sourceSuffix)
	compilerOutputFlag = property(lambda self: self.__compilerOutputFlag)
	linkerOutputFlag = property(lambda self: self.__linkerOutputFlag)
	compileOnlyFlag = property(lambda self: self.__compileOnlyFlag)
	includeFlag = property(lambda self: self.__includeFlag)

	def combinesStages(self):
		'''Returns True iff one invocation can both compile and link, which is
		the case when the compiler and linker name their output with the
		same flag.
		'''
		return self.__compilerOutputFlag == self.__linkerOutputFlag

	def locate(self):
		'''Returns the full path of the toolchain executable, or None if it
		cannot be found.
		'''
		path = self.__env.get('PATH', osEnviron.get('PATH'))
		return which(self.__executable, path = path)

	def compileCommand(self):
		return CompileCommand(
			self.__env, self.__executable,
			list(self.__baseFlags) + [
				self.__includeFlag + path for path in self.__includePaths
				]
			)

	def linkCommand(self):
		'''Returns the command for a separate link stage. Like a compiler driver
		link, it gets the base flags as well, since those can select the
		target (for example "-m32") that the objects were compiled for.
		'''
		return LinkCommand(
			self.__env, self.__executable,
			list(self.__baseFlags) + list(self.__linkFlags)
			)

	def __str__(self):
		return str(self.compileCommand())

class _Command(object):

	def __init__(self, env, executable, flags):
		self.__env = env
		self.__executable = executable
		self.__flags = flags
		self.__mergedEnv = mergeEnv(env)

	@property
	def flags(self):
		return list(self.__flags)

	def __str__(self):
		return ' '.join(
			[ self.__executable ] + self.__flags + (
				[ '(%s)' % ' '.join(
					'%s=%s' % item
					for item in sorted(self.__env.items())
					) ] if self.__env else []
				)
			)

	def commandLine(self, args):
		return [ self.__executable ] + args

	def describe(self, args):
		'''Returns the full invocation for the given arguments as a single
		string, environment assignments first, the way it could be typed in
		a shell.
		'''
		return shjoin(
			[ '%s=%s' % item for item in sorted(self.__env.items()) ]
			+ self.commandLine(args)
			)

	def _run(self, log, name, args):
		commandLine = self.commandLine(args)
		try:
			proc = Popen(
				commandLine,
				bufsize = -1,
				env = self.__mergedEnv,
				stdin = None,
				stdout = PIPE,
				stderr = STDOUT,
				)
		except OSError as ex:
			print('failed to execute %s: %s' % (name, ex), file=log)
			return False
		stdoutdata, stderrdata_ = proc.communicate()
		messages = stdoutdata.decode('utf-8', 'replace')
		if messages or proc.returncode != 0:
			log.write('%s command: %s\n' % (name, shjoin(commandLine)))
		if messages:
			logOutput(log, messages)
		if proc.returncode == 0:
			return True
		else:
			print('return code from %s: %d' % (name, proc.returncode), file=log)
			return False

class CompileCommand(_Command):

	def arguments(
		self, sourcePath, outputPath, outputFlag, compileOnlyFlag = None,
		trailingFlags = ()
		):
		args = self.flags + outputArgs(outputFlag, outputPath) + [ sourcePath ]
		args += trailingFlags
		if compileOnlyFlag:
			args.append(compileOnlyFlag)
		return args

	def run(self, log, args):
		'''Runs the compiler with the given arguments, as assembled by
		arguments(). When a compile-only flag is given, the output is an
		object file, otherwise the compiler also links and the output is an
		executable; in that case the link flags are passed as trailing flags.
		Returns True iff the compiler exited with status 0.
		'''
		return self._run(log, 'compiler', args)

class LinkCommand(_Command):

	def arguments(self, objectPaths, binaryPath, outputFlag):
		return list(objectPaths) + outputArgs(outputFlag, binaryPath) \
			+ self.flags

	def link(self, log, objectPaths, binaryPath, outputFlag = '-o'):
		return self._run(
			log, 'linker', self.arguments(objectPaths, binaryPath, outputFlag)
			)
