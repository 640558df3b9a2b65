# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Tools for reading and writing BPS patches.
"""
from struct import pack, unpack
from bps import util
from bps import constants as C
from bps import operations as ops
from bps.errors import FormatError, TruncatedDataError
from bps.validate import check_stream


def read_header(in_buf):
	"""
	Reads the BPS header from in_buf, returning a Header operation.

	in_buf should implement io.IOBase, opened in 'rb' mode, positioned at the
	start of the patch. Afterwards it is positioned at the first opcode.

	A patch without metadata produces a Header whose metadata is None.
	"""
	magic = in_buf.read(len(C.BPS_MAGIC))

	if magic != C.BPS_MAGIC:
		raise FormatError("File magic should be {expected!r}, got "
				"{actual!r}".format(expected=C.BPS_MAGIC, actual=magic))

	sourcesize = util.read_var_int(in_buf)
	targetsize = util.read_var_int(in_buf)
	metadatasize = util.read_var_int(in_buf)

	metadata = None
	if metadatasize:
		rawmetadata = in_buf.read(metadatasize)
		if len(rawmetadata) != metadatasize:
			raise TruncatedDataError("Patch should have {0} bytes of "
					"metadata, got {1}".format(metadatasize, len(rawmetadata)))

		try:
			metadata = rawmetadata.decode('utf-8')
		except UnicodeDecodeError as e:
			raise FormatError("Patch metadata is not valid UTF-8: "
					"{0}".format(e)) from e

	return ops.Header(sourcesize, targetsize, metadata)


def read_footer(data):
	"""
	Returns the (source, target, patch) CRC32 values from the patch data.
	"""
	if len(data) < C.FOOTER_SIZE:
		raise TruncatedDataError("Patch is {0} bytes, too short to hold "
				"its {1}-byte checksum footer".format(
					len(data), C.FOOTER_SIZE))

	return unpack("<III", data[len(data) - C.FOOTER_SIZE:])


def write_bps(iterable, out_buf):
	"""
	Encodes BPS patch operations from the iterable into a patch in out_buf.

	iterable should yield a Header, read and copy operations covering the
	whole target, a SourceCRC32 and a TargetCRC32, in that order.

	out_buf should implement io.IOBase, opened in 'wb' mode.
	"""
	# Make sure we have a sensible stream to write.
	iterable = check_stream(iterable)

	# Keep track of the patch data's CRC32, so we can write it out at the end.
	out_buf = util.CRCIOWrapper(out_buf)

	# Copy offsets are stored relative to the end of the previous copy of the
	# same kind.
	sourceRelativeOffset = 0
	targetRelativeOffset = 0

	for item in iterable:
		out_buf.write(item.encode(sourceRelativeOffset, targetRelativeOffset))

		if isinstance(item, ops.SourceCopy):
			sourceRelativeOffset = item.offset + item.bytespan
		elif isinstance(item, ops.TargetCopy):
			targetRelativeOffset = item.offset + item.bytespan

	# Lastly, write out the patch CRC32.
	out_buf.write(pack("<I", out_buf.crc32))
