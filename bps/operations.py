# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Classes representing patch operations.

A patch is a Header, followed by SourceRead, TargetRead, SourceCopy and
TargetCopy operations that together cover every byte of the target, followed
by a SourceCRC32 and a TargetCRC32.
"""
from struct import pack
from bps import util
from bps import constants as C


def _classname(obj):
	return "{0.__module__}.{0.__name__}".format(type(obj))


class BaseOperation:

	# Unless otherwise configured, an operation affects no bytes.
	bytespan = 0

	def encode(self, sourceRelativeOffset, targetRelativeOffset):
		"""
		Returns a bytestring representing this operation.

		sourceRelativeOffset is used when encoding SourceCopy operations,
		targetRelativeOffset is used when encoding TargetCopy operations.
		"""
		raise NotImplementedError()


class Header(BaseOperation):

	__slots__ = [
			'sourceSize',
			'targetSize',
			'metadata',
		]

	def __init__(self, sourceSize, targetSize, metadata=None):
		assert isinstance(sourceSize, int)
		assert isinstance(targetSize, int)
		assert sourceSize >= 0
		assert targetSize >= 0
		assert metadata is None or isinstance(metadata, str)

		self.sourceSize = sourceSize
		self.targetSize = targetSize
		self.metadata = metadata

	def __repr__(self):
		return (
				"<{0} "
				"sourceSize={1.sourceSize} "
				"targetSize={1.targetSize} "
				"metadata={1.metadata!r}>".format(_classname(self), self)
			)

	def __eq__(self, other):
		if not isinstance(other, type(self)): return False

		if self.sourceSize != other.sourceSize: return False
		if self.targetSize != other.targetSize: return False
		if self.metadata   != other.metadata:   return False

		return True

	def encode(self, ignored, ignored2):
		res = [C.BPS_MAGIC]
		res.append(util.encode_var_int(self.sourceSize))
		res.append(util.encode_var_int(self.targetSize))

		# A zero-length metadata field means "no metadata".
		metadata = (self.metadata or "").encode('utf-8')
		res.append(util.encode_var_int(len(metadata)))
		res.append(metadata)

		return b''.join(res)


class SourceRead(BaseOperation):

	__slots__ = ['bytespan']

	def __init__(self, bytespan):
		assert isinstance(bytespan, int)
		assert bytespan > 0

		self.bytespan = bytespan

	def __repr__(self):
		return "<{0} bytespan={1.bytespan}>".format(
				_classname(self), self)

	def __eq__(self, other):
		if not isinstance(other, type(self)): return False

		if self.bytespan != other.bytespan: return False

		return True

	def encode(self, ignored, ignored2):
		return util.encode_var_int(
				(self.bytespan - 1) << C.OPCODESHIFT | C.OP_SOURCEREAD
			)


class TargetRead(BaseOperation):

	__slots__ = ['payload']

	def __init__(self, payload):
		assert isinstance(payload, bytes)
		assert len(payload) > 0

		self.payload = payload

	def __repr__(self):
		return "<{0} bytespan={1.bytespan}>".format(
				_classname(self), self
			)

	def __eq__(self, other):
		if not isinstance(other, type(self)): return False

		if self.payload != other.payload: return False

		return True

	@property
	def bytespan(self):
		return len(self.payload)

	def encode(self, ignored, ignored2):
		return b''.join([
				util.encode_var_int(
					(len(self.payload) - 1) << C.OPCODESHIFT | C.OP_TARGETREAD
				),
				self.payload,
			])


class _BaseCopy(BaseOperation):
	"""
	Copies bytespan bytes starting at the absolute position offset.

	On disk the offset is stored relative to the end of the previous copy of
	the same kind, so encode() needs to know where that was.
	"""

	__slots__ = [
			'bytespan',
			'offset',
		]

	opcode = None

	def __init__(self, bytespan, offset):
		assert isinstance(bytespan, int)
		assert bytespan > 0, "Bytespan must be > 0, not {0}".format(bytespan)
		assert isinstance(offset, int)
		assert offset >= 0, "Offset must be >= 0, not {0}".format(offset)

		self.bytespan = bytespan
		self.offset = offset

	def __repr__(self):
		return "<{0} bytespan={1.bytespan} offset={1.offset}>".format(
				_classname(self), self
			)

	def __eq__(self, other):
		if not isinstance(other, type(self)): return False

		if self.bytespan != other.bytespan: return False
		if self.offset   != other.offset:   return False

		return True

	def _encode_relative(self, relativeOffset):
		return b''.join([
				util.encode_var_int(
					(self.bytespan - 1) << C.OPCODESHIFT | self.opcode
				),
				util.encode_var_int(
					util.encode_offset(self.offset - relativeOffset)
				),
			])


class SourceCopy(_BaseCopy):

	opcode = C.OP_SOURCECOPY

	def encode(self, sourceRelativeOffset, ignored):
		return self._encode_relative(sourceRelativeOffset)


class TargetCopy(_BaseCopy):

	opcode = C.OP_TARGETCOPY

	def encode(self, ignored, targetRelativeOffset):
		return self._encode_relative(targetRelativeOffset)


class _BaseCRC32(BaseOperation):

	__slots__ = [
			'value',
		]

	def __init__(self, value):
		assert isinstance(value, int)
		assert value >= 0
		assert value < 2**32

		self.value = value

	def __repr__(self):
		return "<{0} value=0x{1.value:08X}>".format(
				_classname(self), self
			)

	def __eq__(self, other):
		if not isinstance(other, type(self)): return False

		if self.value != other.value: return False

		return True

	def encode(self, ignored, ignored2):
		return pack("<I", self.value)


class SourceCRC32(_BaseCRC32):
	pass


class TargetCRC32(_BaseCRC32):
	pass
