# Progress and problem messages shown to the user while probing.
# Details of what was run go to the probe log instead.

import sys

def plural(count, singular, pluralForm):
	return singular if count == 1 else pluralForm

class Reporter(object):
	'''Writes "--- Checking ..." / "(result)" pairs, warnings and errors.
	'''

	def __init__(self, out = None, err = None):
		self.out = sys.stdout if out is None else out
		self.err = sys.stderr if err is None else err

	def checking(self, what):
		'''Announces a check. The line is left open for the result.
		'''
		self.out.write('--- Checking %s... ' % what)
		self.out.flush()

	def result(self, text):
		'''Completes the line opened by checking().
		'''
		self.out.write('(%s)\n' % text)
		self.out.flush()

	def found(self, ok):
		self.result('found' if ok else 'NOT found')
		return ok

	def warn(self, message):
		self.err.write('*** WARNING: %s\n' % message)

	def error(self, message, exitCode = 1):
		'''Reports a problem that makes it impossible to continue and
		terminates the process.
		'''
		self.err.write('*** ERROR: %s\n' % message)
		self.err.write('*** Stopping.\n')
		self.err.flush()
		sys.exit(exitCode)
