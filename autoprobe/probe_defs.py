# Declares the standard set of headers, functions, libraries and programs
# that the configure command probes for.
# Make names are the part after "HAVE_"; the configure command adds the
# prefix and a suffix that depends on the kind of check.

def _makeName(name):
	return ''.join(ch if ch.isalnum() else '_' for ch in name).upper()

class SystemHeader(object):
	name = None

	@classmethod
	def getMakeName(cls):
		return _makeName(cls.name)

	@classmethod
	def iterHeaders(cls, targetPlatform): # pylint: disable-msg=W0613
		'''Iterates through the headers that must be included, in order.
		The default is just the header itself.
		'''
		yield cls.name

class StdIntHeader(SystemHeader):
	name = 'stdint.h'

class UnistdHeader(SystemHeader):
	name = 'unistd.h'

class SysMManHeader(SystemHeader):
	name = 'sys/mman.h'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		if targetPlatform in ('darwin', 'openbsd'):
			yield 'sys/types.h'
		yield cls.name

class DlfcnHeader(SystemHeader):
	name = 'dlfcn.h'

class SystemFunction(object):
	name = None

	@classmethod
	def getFunctionName(cls):
		return cls.name

	@classmethod
	def getMakeName(cls):
		return _makeName(cls.name)

	@classmethod
	def iterHeaders(cls, targetPlatform):
		raise NotImplementedError

class FTruncateFunction(SystemFunction):
	name = 'ftruncate'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		yield 'unistd.h'

class GetTimeOfDayFunction(SystemFunction):
	name = 'gettimeofday'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		yield 'sys/time.h'

class MMapFunction(SystemFunction):
	name = 'mmap'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		if targetPlatform in ('darwin', 'openbsd'):
			yield 'sys/types.h'
		yield 'sys/mman.h'

class PosixMemAlignFunction(SystemFunction):
	name = 'posix_memalign'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		yield 'stdlib.h'

class NftwFunction(SystemFunction):
	name = 'nftw'

	@classmethod
	def iterHeaders(cls, targetPlatform):
		yield 'ftw.h'

class SystemLibrary(object):
	'''A library that is linked with "-l<libName>". The functions are the
	symbols that a program using the library typically needs.
	'''
	libName = None
	functions = ()

	@classmethod
	def getMakeName(cls):
		return 'LIB' + _makeName(cls.libName)

class MathLibrary(SystemLibrary):
	libName = 'm'
	functions = ('cos', )

class PThreadLibrary(SystemLibrary):
	libName = 'pthread'
	functions = ('pthread_create', )

class DLLibrary(SystemLibrary):
	libName = 'dl'
	functions = ('dlopen', )

class ZLibrary(SystemLibrary):
	libName = 'z'
	functions = ('zlibVersion', )

class Program(object):
	name = None

	@classmethod
	def getMakeName(cls):
		return _makeName(cls.name)

class PkgConfigProgram(Program):
	name = 'pkg-config'

class ArchiverProgram(Program):
	name = 'ar'

class MakeProgram(Program):
	name = 'make'

# Build lists of probe definitions using introspection.
def _discover(localObjects, baseClass):
	for obj in localObjects:
		if isinstance(obj, type) and issubclass(obj, baseClass):
			if obj is not baseClass:
				yield obj

def _sortedByName(classes, attr = 'name'):
	return sorted(classes, key = lambda cls: getattr(cls, attr))

_localObjects = list(locals().values())
systemHeaders = _sortedByName(_discover(_localObjects, SystemHeader))
systemFunctions = _sortedByName(_discover(_localObjects, SystemFunction))
systemLibraries = _sortedByName(
	_discover(_localObjects, SystemLibrary), 'libName'
	)
programs = _sortedByName(_discover(_localObjects, Program))
