# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

BPS_MAGIC = b'BPS1'

# Values used in patch-hunk encoding.
OP_SOURCEREAD = 0b00
OP_TARGETREAD = 0b01
OP_SOURCECOPY = 0b10
OP_TARGETCOPY = 0b11

OPCODEMASK = 0b11
OPCODESHIFT = 2

# The patch ends with three little-endian CRC32 fields: source, target and
# the patch itself.
CRC32_FIELD_SIZE = 4
FOOTER_SIZE = 3 * CRC32_FIELD_SIZE

# Names used when reporting which checksum failed.
SOURCE = "source"
TARGET = "target"
PATCH = "patch"
