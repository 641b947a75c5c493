# Checks for headers, libraries, functions and programs.
# Each check builds a probe program for one specific question; the verbose
# variants also tell the user what is being checked and what was found.

from probe import tryCompile, tryLink
from reporting import Reporter, plural
from sourcegen import (
	declarationLines, includeLines, mainFunction, referenceLines
	)

from itertools import chain
from shutil import which

def checkCompiler(log, toolchain):
	'''Checks whether the toolchain can build anything at all.
	Returns True iff the compiler works.
	'''
	hello = chain(
		# The most famous program.
		includeLines([ 'stdio.h' ]),
		mainFunction([ 'printf("Hello World!\\n");' ])
		)
	ok = tryLink(log, toolchain, hello)
	print('Compiler %s: %s' % ('works' if ok else 'broken', toolchain), file=log)
	return ok

def checkHeaders(log, toolchain, headers):
	'''Checks whether the given headers can be included, in the given order,
	after <stdio.h>.
	Returns True iff compilation succeeded.
	'''
	headers = list(headers)
	lines = chain(includeLines([ 'stdio.h' ] + headers), mainFunction())
	ok = tryCompile(log, toolchain, lines)
	print('%s %s: %s' % (
		'Found' if ok else 'Missing',
		plural(len(headers), 'header', 'headers'),
		' '.join(headers)
		), file=log)
	return ok

def checkFunction(log, toolchain, functionName, headers):
	'''Checks whether the given function is declared by the given headers.
	Returns True iff the function is declared.
	'''
	lines = chain(
		includeLines(headers),
		mainFunction([ '(void) %s;' % functionName ])
		)
	ok = tryCompile(log, toolchain, lines)
	print('%s function: %s' % (
		'Found' if ok else 'Missing',
		functionName
		), file=log)
	return ok

def checkLibraries(log, toolchain, libraries, functions):
	'''Checks whether the given functions can be resolved when linking
	against the given libraries, in addition to the toolchain's own link
	flags. The functions are declared by the probe itself, so no headers
	are needed.
	Returns True iff linking succeeded.
	'''
	libraries = list(libraries)
	functions = list(functions)
	linkToolchain = toolchain.withLinkFlags(
		'-l' + library for library in libraries
		)
	lines = chain(
		declarationLines(functions),
		mainFunction(referenceLines(functions))
		)
	ok = tryLink(log, linkToolchain, lines)
	print('%s %s %s in %s' % (
		'Found' if ok else 'Missing',
		plural(len(functions), 'function', 'functions'),
		' '.join(functions) or '(none)',
		' '.join(libraries) or 'default libraries'
		), file=log)
	return ok

def checkProgram(name, searchPath = None):
	'''Searches the executable search path for a program with the given name.
	The search path defaults to the PATH environment variable.
	Returns the location of the first match, or None if there is none.
	'''
	return which(name, path = searchPath)

def describeHeaderCheck(headers):
	return '%s %s' % (
		plural(len(headers), 'header', 'headers'), ', '.join(headers)
		)

def describeLibraryCheck(libraries, functions):
	'''Returns a description like "functions a, b in library m".
	'''
	parts = []
	if functions:
		parts.append('%s %s' % (
			plural(len(functions), 'function', 'functions'),
			', '.join(functions)
			))
	if libraries:
		parts.append('%s %s' % (
			plural(len(libraries), 'library', 'libraries'),
			', '.join(libraries)
			))
	return ' in '.join(parts) or 'default libraries'

def checkHeadersVerbose(log, toolchain, headers, reporter = None):
	headers = list(headers)
	reporter = reporter or Reporter()
	reporter.checking('for ' + describeHeaderCheck(headers))
	return reporter.found(checkHeaders(log, toolchain, headers))

def checkLibrariesVerbose(
	log, toolchain, libraries, functions, reporter = None
	):
	libraries = list(libraries)
	functions = list(functions)
	reporter = reporter or Reporter()
	reporter.checking('for ' + describeLibraryCheck(libraries, functions))
	return reporter.found(
		checkLibraries(log, toolchain, libraries, functions)
		)

def checkProgramVerbose(name, searchPath = None, reporter = None):
	reporter = reporter or Reporter()
	reporter.checking('for program %s' % name)
	location = checkProgram(name, searchPath)
	reporter.result('NOT found' if location is None else location)
	return location
