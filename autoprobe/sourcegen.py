# Builds the source text of probe programs and writes it to temporary files.

from io import open
from os import remove
from os.path import isfile
from tempfile import mkstemp

class EnvironmentFailure(OSError):
	'''Raised when a probe cannot be performed at all, for example because
	no temporary file can be created or the toolchain cannot be found.
	This is different from a probe that fails: that only means the probed
	feature is not available.
	'''

def includeLines(headers):
	'''Iterates through "#include" lines for the given headers.
	Headers that are already enclosed in angle brackets or quotes are used
	as-is, bare names get angle brackets.
	'''
	for header in headers:
		if header.startswith(('<', '"')):
			yield '#include %s' % header
		else:
			yield '#include <%s>' % header

def declarationLines(functionNames):
	'''Iterates through external declarations for the given functions.
	The prototype is deliberately wrong: a link probe only cares whether
	the symbol can be resolved, not what its signature is.
	'''
	for name in functionNames:
		yield '#ifdef __cplusplus'
		yield 'extern "C"'
		yield '#endif'
		yield 'char %s(void);' % name

def referenceLines(functionNames):
	'''Iterates through statements that use each of the given functions,
	forcing the linker to resolve them.
	'''
	for name in functionNames:
		yield '%s();' % name

def mainFunction(bodyLines = ()):
	'''Wraps the given statements in a main() function that returns 0.
	'''
	yield 'int main(int argc, char** argv) {'
	for line in bodyLines:
		yield '  ' + line
	yield '  return 0;'
	yield '}'

def banner(commandLine):
	# Keep a command containing "*/" from ending the comment early.
	yield '/* Generated probe program.'
	yield ' * Command: %s' % commandLine.replace('*/', '* /')
	yield ' */'

class TempSource(object):
	'''Scope for the temporary files of a single probe.
	On entry the given program lines are written to a new, uniquely named
	source file; the object file and executable paths are derived from the
	same stem in the same directory. On exit all of those files that exist
	are removed, no matter how the scope is left.
	The command line for the banner is either text or a function that is
	given this scope, for commands that name the temporary files.
	'''

	def __init__(self, lines, toolchain, commandLine, directory = None):
		self.__lines = lines
		self.__toolchain = toolchain
		self.__commandLine = commandLine
		self.__directory = directory
		self.sourcePath = None
		self.basePath = None
		self.objectPath = None
		self.executablePath = None

	def __enter__(self):
		toolchain = self.__toolchain
		suffix = toolchain.sourceSuffix
		try:
			fd, sourcePath = mkstemp(
				suffix = suffix, prefix = 'probe_', dir = self.__directory
				)
		except OSError as ex:
			raise EnvironmentFailure(
				'Cannot create temporary source file: %s' % ex
				) from ex
		self.sourcePath = sourcePath
		self.basePath = sourcePath[ : -len(suffix)] if suffix else sourcePath
		self.objectPath = self.basePath + toolchain.objectSuffix
		self.executablePath = self.basePath + toolchain.executableSuffix
		commandLine = self.__commandLine
		try:
			with open(fd, 'w', encoding='utf-8') as out:
				if callable(commandLine):
					commandLine = commandLine(self)
				for line in banner(commandLine):
					print(line, file=out)
				for line in self.__lines:
					print(line, file=out)
		except OSError as ex:
			self.cleanup()
			raise EnvironmentFailure(
				'Cannot write temporary source file "%s": %s'
				% (sourcePath, ex)
				) from ex
		return self

	def __exit__(self, excType, excValue, traceback):
		self.cleanup()
		return False

	def artifacts(self):
		'''Returns the paths of all files this probe may have created.
		'''
		return [
			path
			for path in (self.sourcePath, self.objectPath, self.executablePath)
			if path is not None
			]

	def cleanup(self):
		'''Removes the files that exist. A file that cannot be removed does
		not keep the others from being removed; the first failure is raised
		afterwards.
		'''
		failure = None
		for path in self.artifacts():
			if isfile(path):
				try:
					remove(path)
				except OSError as ex:
					if failure is None:
						failure = ex
		if failure is not None:
			raise failure
