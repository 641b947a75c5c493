# Removes compiler and linker flags that turn warnings into errors.
# A probe tests whether something can be built at all; the strictness policy
# of the project being configured should not turn a capability into a
# missing feature.

# Exact spellings of "treat warnings as errors" for the toolchains we know.
_warningAsErrorFlags = frozenset((
	'-Werror',
	'-pedantic-errors',
	'/WX',
	'-WX',
	'--warn-error',
	'-warnaserror',
	'--fatal-warnings',
	'-Wl,--fatal-warnings',
	))

# Spellings that take a value, for example "-Werror=implicit".
_warningAsErrorPrefixes = (
	'-Werror=',
	'--warn-error=',
	'-warnaserror:',
	)

def isWarningAsError(flag):
	'''Returns True iff the given flag makes the toolchain fail on warnings.
	'''
	return flag in _warningAsErrorFlags \
		or flag.startswith(_warningAsErrorPrefixes)

def sanitizeFlags(flags):
	'''Returns a new list containing the given flags, except the ones that
	make warnings fatal. The relative order of the remaining flags is kept.
	The given sequence is not modified.
	'''
	return [ flag for flag in flags if not isWarningAsError(flag) ]
