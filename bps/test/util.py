# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

from io import BytesIO
from struct import pack
from pkgutil import get_data
from zlib import crc32
from bps import operations as ops
from bps.io import write_bps


def find_data(name):
	"""
	Retrieves the raw contents of a file in the test data directory.
	"""
	return get_data("bps.test", "testdata/{0}".format(name))


def find_bps(name):
	"""
	Retrieves the raw contents of a BPS patch from the test data directory.
	"""
	return find_data("{0}.bps".format(name))


def make_patch(source, target, oplist, metadata=None):
	"""
	Encodes oplist as a complete patch transforming source into target.
	"""
	events = [ops.Header(len(source), len(target), metadata)]
	events.extend(oplist)
	events.append(ops.SourceCRC32(crc32(source)))
	events.append(ops.TargetCRC32(crc32(target)))

	out_buf = BytesIO()
	write_bps(events, out_buf)
	return out_buf.getvalue()


def flip_byte(data, index):
	"""
	Returns a copy of data with every bit of the byte at index inverted.
	"""
	data = bytearray(data)
	data[index] ^= 0xFF
	return bytes(data)


def finish_patch(data, source, target):
	"""
	Appends the checksum footer to raw header-and-body data.

	Useful for building patches that write_bps would refuse to encode.
	"""
	data = bytes(data) + pack("<II", crc32(source), crc32(target))
	return data + pack("<I", crc32(data))
