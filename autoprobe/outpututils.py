# Functions for writing probe results to generated files.

from io import open
from os import makedirs
from os.path import dirname, isdir, isfile
import sys

def createDirFor(filePath):
	'''Creates an output directory for containing the given file path.
	Nothing happens if the directory already exists.
	'''
	dirPath = dirname(filePath)
	if dirPath and not isdir(dirPath):
		makedirs(dirPath)

def rewriteIfChanged(path, lines, out = None):
	'''Writes the file with the given path if it does not exist yet or if its
	contents should change. The contents are given by the "lines" sequence.
	What happens is reported on "out", which defaults to stdout.
	Returns True if the file was (re)written, False otherwise.
	'''
	if out is None:
		out = sys.stdout
	newLines = [line + '\n' for line in lines]

	if isfile(path):
		with open(path, 'r', encoding='utf-8') as inp:
			oldLines = inp.readlines()
		if newLines == oldLines:
			print('Up to date: %s' % path, file=out)
			return False
		else:
			print('Updating %s...' % path, file=out)
	else:
		print('Creating %s...' % path, file=out)
		createDirFor(path)

	with open(path, 'w', encoding='utf-8') as outFile:
		outFile.writelines(newLines)
	return True

def iterHeaderDefines(probeVars):
	'''Iterates through the lines of a C header that defines each of the
	given names whose value is true and mentions the others as undefined.
	'''
	yield '// Automatically generated by autoprobe.'
	for name in sorted(probeVars):
		if probeVars[name]:
			yield '#define %s 1' % name
		else:
			yield '// #undef %s' % name

def iterMakeVars(probeVars):
	'''Iterates through the lines of a Makefile fragment assigning each of
	the given values. True becomes "true", false and None become empty.
	'''
	yield '# Automatically generated by autoprobe.'
	yield '# Non-empty value means found, empty means not found.'
	for name in sorted(probeVars):
		value = probeVars[name]
		if value is True:
			value = 'true'
		elif value is False or value is None:
			value = ''
		yield '%s:=%s' % (name, value)
