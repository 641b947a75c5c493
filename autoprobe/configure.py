# Probes the build environment for the standard set of headers, functions,
# libraries and programs and writes the results as a C header and a Makefile
# fragment.

from checkcache import CheckCache
from checks import (
	checkCompiler, checkFunction, checkHeaders, checkLibraries, checkProgram,
	describeHeaderCheck, describeLibraryCheck
	)
from compilers import Toolchain
from outpututils import iterHeaderDefines, iterMakeVars, rewriteIfChanged
from probe_defs import programs, systemFunctions, systemHeaders, systemLibraries
from reporting import Reporter
from sourcegen import EnvironmentFailure

from io import open
from os import makedirs
from os.path import isdir
from platform import system
import sys

def detectPlatform():
	'''Returns the lower case name of the OS we are running on, for example
	"linux" or "darwin".
	'''
	return system().lower()

class TargetSystem(object):

	def __init__(self, log, toolchain, platform, reporter):
		self.log = log
		self.toolchain = toolchain
		self.platform = platform
		self.reporter = reporter
		self.cache = CheckCache(log, toolchain)
		# Values for the Makefile fragment.
		self.outVars = {}
		# Names for the C header; only the true ones get defined.
		self.outDefines = {}

	def checkAll(self):
		'''Run all probes.
		Exits through the reporter if there is no working compiler.
		'''
		self.hello()
		for header in systemHeaders:
			self.checkHeader(header)
		for func in systemFunctions:
			self.checkFunc(func)
		for library in systemLibraries:
			self.checkLibrary(library)
		for program in programs:
			self.checkProgram(program)

	def writeAll(self, outDir):
		rewriteIfChanged(
			outDir + '/probed_defs.h', iterHeaderDefines(self.outDefines)
			)
		rewriteIfChanged(
			outDir + '/probed_defs.mk', iterMakeVars(self.outVars)
			)

	def everything(self, outDir):
		self.checkAll()
		self.writeAll(outDir)

	def hello(self):
		'''Check compiler with the most famous program.
		'''
		self.reporter.checking('whether the C compiler works')
		ok = self.cache.run(checkCompiler)
		self.reporter.result('yes' if ok else 'no')
		self.outVars['COMPILER'] = ok
		if not ok:
			self.reporter.error(
				'No working C compiler was found (tried "%s"); '
				'set the CC environment variable and rerun configure, '
				'see %s for details'
				% (self.toolchain, getattr(self.log, 'name', 'the probe log'))
				)

	def checkHeader(self, header):
		headers = list(header.iterHeaders(self.platform))
		self.reporter.checking('for ' + describeHeaderCheck(headers))
		ok = self.reporter.found(self.cache.run(checkHeaders, headers))
		name = 'HAVE_%s' % header.getMakeName()
		self.outVars[name] = ok
		self.outDefines[name] = ok

	def checkFunc(self, func):
		'''Probe for function.
		'''
		self.reporter.checking('for function %s' % func.getFunctionName())
		ok = self.cache.run(
			checkFunction, func.getFunctionName(),
			list(func.iterHeaders(self.platform))
			)
		self.reporter.found(ok)
		name = 'HAVE_%s' % func.getMakeName()
		self.outVars[name] = ok
		self.outDefines[name] = ok

	def checkLibrary(self, library):
		libraries = [ library.libName ]
		functions = list(library.functions)
		self.reporter.checking(
			'for ' + describeLibraryCheck(libraries, functions)
			)
		ok = self.reporter.found(
			self.cache.run(checkLibraries, libraries, functions)
			)
		name = 'HAVE_%s' % library.getMakeName()
		self.outVars[name] = ok
		self.outDefines[name] = ok

	def checkProgram(self, program):
		self.reporter.checking('for program %s' % program.name)
		location = self.cache.runPlain(checkProgram, program.name)
		self.reporter.result('NOT found' if location is None else location)
		self.outVars['PROGRAM_%s' % program.getMakeName()] = location or ''

def main(outDir, environ = None, reporter = None):
	reporter = reporter or Reporter()
	toolchain = Toolchain.fromEnvironment(environ)

	if not isdir(outDir):
		makedirs(outDir)
	with open(outDir + '/probe.log', 'w', encoding='utf-8') as log:
		print('Probing target system...')
		print('Probing system with: %s' % toolchain, file=log)
		target = TargetSystem(log, toolchain, detectPlatform(), reporter)
		try:
			target.everything(outDir)
		except EnvironmentFailure as ex:
			print('Probing aborted: %s' % ex, file=log)
			reporter.error('Cannot perform probes: %s' % ex)
	return target

def run():
	if len(sys.argv) == 2:
		try:
			main(sys.argv[1])
		except ValueError as ex:
			print(ex, file=sys.stderr)
			sys.exit(2)
	else:
		print('Usage: autoprobe-configure OUTDIR', file=sys.stderr)
		sys.exit(2)

if __name__ == '__main__':
	run()
