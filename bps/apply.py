# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Functions for applying BPS patches.

Applying a patch happens in stages: read the header, run every opcode to
build the complete target in memory, check all three CRC32 values, and only
then write the target out. If any stage fails, nothing is written.

Both the patch and the source file are read into memory in full, so they
must fit in available memory.
"""
from io import BytesIO
from bps import util
from bps import constants as C
from bps.errors import BoundsError, TruncatedDataError
from bps.io import read_header, read_footer
from bps.validate import verify_checksums


class Interpreter:
	"""
	Runs the opcodes in the body of a BPS patch.

	The copy offsets persist from one opcode to the next for the length of
	a single run() call, and are reset at the start of the next.
	"""

	def __init__(self):
		self.reset()

	def reset(self):
		# Points at the next byte of the target buffer to be written.
		self.targetWriteOffset = 0

		# Point just past the last byte read by the most recent SourceCopy
		# and TargetCopy operations, respectively.
		self.sourceRelativeOffset = 0
		self.targetRelativeOffset = 0

	def run(self, in_buf, bodyEnd, source, target):
		"""
		Reads opcodes from in_buf until it reaches bodyEnd, filling target.

		in_buf should be positioned just after the header, and must not
		contain the checksum footer.

		source should be a bytes object, or something impersonating one.

		target should be a bytearray exactly as long as the patch's declared
		target size.
		"""
		self.reset()

		while in_buf.tell() < bodyEnd:
			value = util.read_var_int(in_buf)
			opcode = value & C.OPCODEMASK
			length = (value >> C.OPCODESHIFT) + 1

			self._check_target_space(target, length)

			if opcode == C.OP_SOURCEREAD:
				self._source_read(source, target, length)

			elif opcode == C.OP_TARGETREAD:
				self._target_read(in_buf, target, length)

			elif opcode == C.OP_SOURCECOPY:
				self._source_copy(in_buf, source, target, length)

			else:
				self._target_copy(in_buf, target, length)

		if self.targetWriteOffset != len(target):
			raise TruncatedDataError("Patch should produce {0} bytes of "
					"target, but its opcodes only produced {1}".format(
						len(target), self.targetWriteOffset))

	def _check_target_space(self, target, length):
		if self.targetWriteOffset + length > len(target):
			raise BoundsError("Cannot write {0} bytes at offset {1}, target "
					"is only {2} bytes".format(
						length, self.targetWriteOffset, len(target)))

	def _source_read(self, source, target, length):
		start = self.targetWriteOffset
		end = start + length

		if end > len(source):
			raise BoundsError("SourceRead of {0} bytes at offset {1} reads "
					"past the end of the {2}-byte source".format(
						length, start, len(source)))

		target[start:end] = source[start:end]
		self.targetWriteOffset = end

	def _target_read(self, in_buf, target, length):
		payload = in_buf.read(length)

		if len(payload) != length:
			raise TruncatedDataError("TargetRead wants {0} bytes, but the "
					"patch body only has {1} left".format(
						length, len(payload)))

		target[self.targetWriteOffset:self.targetWriteOffset+length] = payload
		self.targetWriteOffset += length

	def _source_copy(self, in_buf, source, target, length):
		start = self.sourceRelativeOffset + util.read_offset(in_buf)
		end = start + length

		if start < 0 or end > len(source):
			raise BoundsError("SourceCopy of {0} bytes from offset {1} is "
					"outside the {2}-byte source".format(
						length, start, len(source)))

		target[self.targetWriteOffset:self.targetWriteOffset+length] = \
				source[start:end]
		self.sourceRelativeOffset = end
		self.targetWriteOffset += length

	def _target_copy(self, in_buf, target, length):
		start = self.targetRelativeOffset + util.read_offset(in_buf)

		if start < 0 or start + length > len(target):
			raise BoundsError("TargetCopy of {0} bytes from offset {1} is "
					"outside the {2}-byte target".format(
						length, start, len(target)))

		# Because TargetCopy can be used to implement RLE-type compression,
		# the source and destination ranges may overlap, so we have to copy
		# a byte at a time rather than just slicing target.
		readOffset = start
		writeOffset = self.targetWriteOffset
		for _ in range(length):
			target[writeOffset] = target[readOffset]
			readOffset += 1
			writeOffset += 1

		self.targetRelativeOffset = readOffset
		self.targetWriteOffset = writeOffset


def apply_to_bytes(patchData, sourceData):
	"""
	Applies the BPS patch in patchData to sourceData.

	Returns a (header, target) tuple, where header is the patch's Header
	operation and target is a bytearray that has passed every checksum.
	"""
	footer = read_footer(patchData)

	bodyEnd = len(patchData) - C.FOOTER_SIZE
	in_buf = BytesIO(patchData[:bodyEnd])

	header = read_header(in_buf)

	try:
		target = bytearray(header.targetSize)
	except (OverflowError, MemoryError) as e:
		raise BoundsError("Cannot allocate a {0}-byte target".format(
				header.targetSize)) from e

	Interpreter().run(in_buf, bodyEnd, sourceData, target)

	verify_checksums(footer, sourceData, target, patchData)

	return header, target


def apply_to_files(patch, source, target):
	"""
	Applies the BPS patch to the source file, writing to the target file.

	patch should be a file handle containing BPS patch data.

	source should be a readable, binary file handle containing the source data
	for the BPS patch.

	target should be a writable, binary file handle, which will contain the
	result of applying the given patch to the given source data. Nothing is
	written to it unless the patch applies cleanly.

	Returns the patch's Header operation.
	"""
	header, targetData = apply_to_bytes(patch.read(), source.read())

	target.write(targetData)

	return header


def apply_to_paths(patchPath, sourcePath, targetPath):
	"""
	Applies the BPS patch at patchPath to sourcePath, creating targetPath.

	targetPath is only created once the patched data has been verified, so a
	failed application leaves no output file behind.

	Returns the patch's Header operation.
	"""
	with open(patchPath, 'rb') as patch, open(sourcePath, 'rb') as source:
		header, targetData = apply_to_bytes(patch.read(), source.read())

	with open(targetPath, 'wb') as target:
		target.write(targetData)

	return header
