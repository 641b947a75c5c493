# Remembers check outcomes, so a check that is requested from several places
# in a build description is only performed once.
# The cache is owned by the caller; the probe engine itself keeps no state.

def _freeze(value):
	if isinstance(value, (list, tuple)):
		return tuple(_freeze(item) for item in value)
	elif isinstance(value, (set, frozenset)):
		return frozenset(_freeze(item) for item in value)
	else:
		return value

class CheckCache(object):
	'''Maps a check signature (function name plus arguments) to its outcome.
	Checks run through run() get the log and toolchain this cache was
	created with as their first two arguments.
	'''

	def __init__(self, log, toolchain):
		self.log = log
		self.toolchain = toolchain
		self.__results = {}

	@staticmethod
	def signature(check, args):
		return (check.__name__, ) + _freeze(args)

	def __lookup(self, check, args, compute):
		key = self.signature(check, args)
		try:
			return self.__results[key]
		except KeyError:
			pass
		# An EnvironmentFailure propagates before anything is stored.
		result = compute()
		self.__results[key] = result
		return result

	def run(self, check, *args):
		'''Performs a toolchain check, unless one with the same signature was
		performed before. Returns the (cached) outcome.
		'''
		return self.__lookup(
			check, args, lambda: check(self.log, self.toolchain, *args)
			)

	def runPlain(self, check, *args):
		'''Like run(), for checks that do not use the log and toolchain,
		such as checkProgram().
		'''
		return self.__lookup(check, args, lambda: check(*args))

	def __contains__(self, signature):
		return signature in self.__results

	def __len__(self):
		return len(self.__results)

	def items(self):
		'''Returns the cached (signature, outcome) pairs, sorted by signature.
		'''
		return sorted(self.__results.items(), key = lambda item: repr(item[0]))
