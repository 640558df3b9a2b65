# This program is free software. It comes without any warranty, to
# the extent permitted by applicable law. You can redistribute it
# and/or modify it under the terms of the Do What The Fuck You Want
# To Public License, Version 2, as published by Sam Hocevar. See
# the COPYING file included with this distribution or
# http://sam.zoy.org/wtfpl/COPYING for more details.

"""
Command-line front end for applying BPS patches.
"""
import argparse
import errno
import os
import sys
from bps.apply import apply_to_paths
from bps.errors import CorruptFile


def make_parser():
	parser = argparse.ArgumentParser(
			prog="bps-apply",
			description="Applies a BPS patch to a file, writing the patched "
				"copy only if every checksum matches.",
		)

	parser.add_argument("patch", help="the BPS patch to apply")
	parser.add_argument("source",
			help="the original file the patch was made from")
	parser.add_argument("target", help="where to write the patched file")

	return parser


def check_inputs(patchPath, sourcePath):
	"""
	Raises FileNotFoundError unless both input files exist.
	"""
	for label, path in (("patch", patchPath), ("source", sourcePath)):
		if not os.path.isfile(path):
			raise FileNotFoundError(errno.ENOENT,
					"The {0} file does not exist".format(label), path)


def main(argv=None):
	"""
	Runs bps-apply with the given arguments, returning the exit status.
	"""
	if argv is None:
		argv = sys.argv[1:]

	parser = make_parser()

	if len(argv) != 3:
		parser.print_usage(sys.stdout)
		return 0

	# "--" keeps file names that start with "-" from being read as options.
	args = parser.parse_args(["--"] + list(argv))

	try:
		check_inputs(args.patch, args.source)
		header = apply_to_paths(args.patch, args.source, args.target)
	except (CorruptFile, OSError) as e:
		sys.stderr.write("{0}: {1}\n".format(parser.prog, e))
		return 1

	if header.metadata is not None:
		sys.stderr.write("Patch metadata:\n{0}\n".format(
				header.metadata.rstrip("\n")))

	return 0


if __name__ == "__main__":
	sys.exit(main())
