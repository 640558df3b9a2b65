# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Tools for validating BPS patches.
"""
from zlib import crc32
from bps import constants as C
from bps import operations as ops
from bps.errors import FormatError, TruncatedDataError, BoundsError, \
		ChecksumError


def _check_next(iterable):
	"""
	Internal function.

	Check the iterable does have a next value, and return it.
	"""
	try:
		return next(iterable)
	except StopIteration:
		raise TruncatedDataError(
				"truncated patch: expected more operations after this.")


def _check_crc32(item, expectedType):
	"""
	Internal function.

	Check that item is a CRC32 operation of the expected type.
	"""
	if not isinstance(item, expectedType):
		raise FormatError("bad operation: expected {expected}, not "
				"{item!r}".format(expected=expectedType.__name__, item=item))


def check_stream(iterable):
	"""
	Yields operations from iterable if they represent a valid BPS patch.

	Raises FormatError if an operation is out of place, TruncatedDataError
	if the stream ends early, and BoundsError if an operation reaches outside
	the source or target.
	"""
	iterable = iter(iterable)

	header = _check_next(iterable)

	if not isinstance(header, ops.Header):
		raise FormatError("bad stream: must start with a header, not "
				"{header!r}".format(header=header))

	yield header

	sourceSize = header.sourceSize
	targetSize = header.targetSize
	targetWriteOffset = 0

	while targetWriteOffset < targetSize:
		item = _check_next(iterable)

		if isinstance(item, ops.SourceRead):
			# This operation reads from the source file at the same offset it
			# writes to the target, so that byte-range must exist in both.
			if targetWriteOffset + item.bytespan > sourceSize:
				raise BoundsError("bad operation: reads past the end of the "
						"source file: {item!r}".format(item=item))

		elif isinstance(item, ops.TargetRead):
			pass

		elif isinstance(item, ops.SourceCopy):
			if item.offset + item.bytespan > sourceSize:
				raise BoundsError("bad operation: reads past the end "
						"of the source file: {item!r}".format(item=item))

		elif isinstance(item, ops.TargetCopy):
			# The copy may overlap the bytes it writes, or read bytes not
			# written yet, but must stay inside the target.
			if item.offset + item.bytespan > targetSize:
				raise BoundsError("bad operation: reads past the end "
						"of the target file: {item!r}".format(item=item))

		else:
			raise FormatError("bad operation: expected a read or copy, not "
					"{item!r}".format(item=item))

		targetWriteOffset += item.bytespan

		if targetWriteOffset > targetSize:
			raise BoundsError("bad operation: writes past the end of the "
					"target: {item!r}".format(item=item))

		yield item

	sourcecrc32 = _check_next(iterable)
	_check_crc32(sourcecrc32, ops.SourceCRC32)
	yield sourcecrc32

	targetcrc32 = _check_next(iterable)
	_check_crc32(targetcrc32, ops.TargetCRC32)
	yield targetcrc32

	# Check that the iterable is now empty.
	for garbage in iterable:
		raise FormatError("trailing garbage in stream: {garbage!r}".format(
				garbage=garbage))


def verify_checksums(footer, source, target, patch):
	"""
	Checks the three CRC32 values in footer, in the order they're stored.

	footer should be a (sourceCRC32, targetCRC32, patchCRC32) tuple, as
	returned by bps.io.read_footer.

	patch should be the complete patch data; its own checksum covers every
	byte except the last four.

	Raises ChecksumError naming the first value that doesn't match.
	"""
	expectedSource, expectedTarget, expectedPatch = footer

	checks = [
			(C.SOURCE, expectedSource, source),
			(C.TARGET, expectedTarget, target),
			(C.PATCH, expectedPatch,
				memoryview(patch)[:len(patch) - C.CRC32_FIELD_SIZE]),
		]

	for which, expected, data in checks:
		actual = crc32(data) & 0xffffffff
		if actual != expected:
			raise ChecksumError(which, expected, actual)
