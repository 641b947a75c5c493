# Helpers for running external programs and logging what they say.

from os import environ
from shlex import split as shsplit
from subprocess import PIPE, STDOUT, Popen

# Toolchain messages are logged; keep them in a predictable language.
defaultEnv = {'LC_ALL': 'C.UTF-8'}

def splitCommandLine(commandLine):
	'''Splits a command line into environment assignments and arguments.
	Leading "NAME=value" words are taken as environment assignments, like
	a shell would. Returns a pair of a dictionary and a list of arguments.
	Raises ValueError if no command is specified.
	'''
	commandParts = shsplit(commandLine)
	env = {}
	while commandParts:
		if '=' in commandParts[0]:
			name, value = commandParts[0].split('=', 1)
			del commandParts[0]
			env[name] = value
		else:
			return env, commandParts
	else:
		raise ValueError('No command specified in "%s"' % commandLine)

def mergeEnv(env):
	'''Returns a copy of the process environment, updated with the default
	toolchain environment and the given dictionary.
	'''
	mergedEnv = dict(environ)
	mergedEnv.update(defaultEnv)
	if env:
		mergedEnv.update(env)
	return mergedEnv

def logOutput(log, text):
	text = text.replace('\r', '')
	log.write(text)
	if not text.endswith('\n'):
		log.write('\n')

def _toArgs(commandLine):
	if isinstance(commandLine, str):
		return splitCommandLine(commandLine)
	else:
		return {}, list(commandLine)

def runProgram(log, commandLine, env = None):
	'''Run a program and wait for it to finish.
	Anything it writes to stdout or stderr is logged.
	Returns True iff the program could be started and exited with status 0.
	'''
	cmdEnv, args = _toArgs(commandLine)
	if env:
		cmdEnv.update(env)
	try:
		proc = Popen(
			args, bufsize = -1, env = mergeEnv(cmdEnv),
			stdin = None, stdout = PIPE, stderr = STDOUT,
			)
	except OSError as ex:
		print('Failed to execute "%s": %s' % (shjoin(args), ex), file=log)
		return False
	stdoutdata, stderrdata_ = proc.communicate()
	if stdoutdata:
		log.write('Output of "%s":\n' % shjoin(args))
		logOutput(log, stdoutdata.decode('utf-8', 'replace'))
	if proc.returncode == 0:
		return True
	else:
		print('Execution failed with exit code %d' % proc.returncode, file=log)
		return False

def captureStdout(log, commandLine, env = None):
	'''Run a command and capture what it writes to stdout.
	The command is either a command line string, which may start with
	environment assignments, or a sequence of arguments.
	If the command fails or writes something to stderr, that is logged.
	Returns the captured string, or None if the command failed.
	'''
	cmdEnv, args = _toArgs(commandLine)
	if env:
		cmdEnv.update(env)
	try:
		proc = Popen(
			args, bufsize = -1, env = mergeEnv(cmdEnv),
			stdin = None, stdout = PIPE, stderr = PIPE,
			)
	except OSError as ex:
		print('Failed to execute "%s": %s' % (shjoin(args), ex), file=log)
		return None
	stdoutdata, stderrdata = proc.communicate()
	if stderrdata:
		severity = 'warning' if proc.returncode == 0 else 'error'
		log.write('%s executing "%s"\n' % (severity.capitalize(), shjoin(args)))
		logOutput(log, stderrdata.decode('utf-8', 'replace'))
	if proc.returncode != 0:
		print('Execution failed with exit code %d' % proc.returncode, file=log)
		return None
	try:
		return stdoutdata.decode('utf-8')
	except UnicodeDecodeError as ex:
		print('Output of "%s" is not UTF-8: %s' % (shjoin(args), ex), file=log)
		return None

def shjoin(parts):
	'''Joins the given sequence into a single string with space as a separator.
	Characters that have a special meaning for the shell are escaped.
	This is the counterpart of shlex.split().
	'''
	def escape(part):
		return ''.join(
			'\\' + ch if ch in '\\ \'"$()[]' else ch
			for ch in part
			)
	return ' '.join(escape(part) for part in parts)
