# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Exceptions raised while reading, validating and applying BPS patches.
"""


class CorruptFile(ValueError):
	"""
	Raised to indicate that a BPS patch is not valid.
	"""
	pass


class FormatError(CorruptFile):
	"""
	The patch does not have the structure of a BPS patch.
	"""
	pass


class TruncatedDataError(CorruptFile):
	"""
	The patch ended before all the data it describes could be read.
	"""
	pass


class BoundsError(CorruptFile):
	"""
	A patch operation reads or writes outside the buffer it addresses.
	"""
	pass


class ChecksumError(CorruptFile):
	"""
	One of the CRC32 values in the patch footer does not match.

	which is one of "source", "target" or "patch".
	"""

	def __init__(self, which, expected, actual):
		super().__init__("{0} file should have CRC32 {1:08X}, got {2:08X}"
				.format(which.capitalize(), expected, actual))
		self.which = which
		self.expected = expected
		self.actual = actual
