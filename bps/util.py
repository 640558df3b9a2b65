# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Low-level encodings used by BPS patches.

BPS stores every size, length and offset as a variable-length integer: seven
bits per byte, least-significant group first, with the high bit marking the
final byte. Unlike a plain base-128 number, each continuation byte also adds
an implicit bias, so every byte sequence decodes to exactly one value:

	b"\\x80"     -> 0
	b"\\xff"     -> 127
	b"\\x00\\x80" -> 128
	b"\\x00\\x81" -> 256
"""
import io
from zlib import crc32
from bps.errors import TruncatedDataError


class CRCIOWrapper(io.IOBase):
	"""
	A wrapper for an IO instance that tracks the CRC32 of data written to it.

	This wrapper prohibits seeking, since the running CRC32 only makes sense
	for data that passes through in order.
	"""

	def __init__(self, inner):
		self.inner = inner
		self.crc32 = 0

	def _update_crc32(self, data):
		self.crc32 = crc32(data, self.crc32) & 0xffffffff
		return data

	def __getattr__(self, name):
		return getattr(self.inner, name)

	def write(self, data):
		return self.inner.write(self._update_crc32(data))

	def seek(self, *args, **kwargs):
		raise io.UnsupportedOperation("Seeking not supported.")


def read_var_int(handle):
	"""
	Read a variable-length integer from the given file handle.

	Raises TruncatedDataError if the handle runs out before the byte with the
	high bit set.
	"""
	res = 0
	shift = 1

	while True:
		data = handle.read(1)
		if not data:
			raise TruncatedDataError(
					"Patch ended in the middle of a variable-length integer"
				)

		byte = data[0]
		res += (byte & 0x7f) * shift
		if byte & 0x80: break
		shift <<= 7
		res += shift

	return res


def encode_var_int(number):
	"""
	Returns a bytearray encoding the given number.
	"""
	if number < 0:
		raise ValueError("Cannot encode negative number {0!r}".format(number))

	buf = bytearray()

	while True:
		buf.append(number & 0x7f)
		number >>= 7

		if number == 0:
			buf[-1] |= 0x80
			break

		number -= 1

	return buf


def write_var_int(number, handle):
	"""
	Writes a variable-length integer to the given file handle.
	"""
	handle.write(encode_var_int(number))


def encode_offset(displacement):
	"""
	Returns the unsigned value storing a signed copy displacement.

	The magnitude is shifted up by one and the sign lives in the low bit.
	"""
	return (abs(displacement) << 1) | (displacement < 0)


def decode_offset(data):
	"""
	Returns the signed displacement stored in the unsigned value data.
	"""
	offset = data >> 1
	if data & 1:
		offset = -offset
	return offset


def read_offset(handle):
	"""
	Read a signed copy displacement from the given file handle.
	"""
	return decode_offset(read_var_int(handle))
