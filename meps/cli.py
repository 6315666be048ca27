"""
Command-line interface for reading and downloading MEPS files.

Usage:
    # Print shape and first rows of the 2014 FYC file
    meps read --year 2014 --type FYC --dir mydata

    # Convert a file to CSV
    meps read --file h171 --web --out h171.csv

    # Save .ssp files into a local directory for later reads
    meps download --file h171 --dir mydata

    # List file names for a year
    meps names --year 2014
"""

import argparse
import sys

from meps import config
from meps.dataset_request import make_request
from meps.errors import MEPSError
from meps.fetch import download_ssp
from meps.puf_names import get_puf_names
from meps.resolver import resolve
from meps.retrieval import read_meps


def _add_request_args(parser):
    parser.add_argument("--file", dest="identifier",
                        help="Standardized file name, e.g. h171")
    parser.add_argument("--year", type=int, help="Data year")
    parser.add_argument("--type", dest="file_type",
                        help="File type: " + ", ".join(config.FILE_TYPES))


def build_parser():
    parser = argparse.ArgumentParser(
        prog="meps", description="Read MEPS public use files")
    sub = parser.add_subparsers(dest="command", required=True)

    p_read = sub.add_parser("read", help="Load a file and show or export it")
    _add_request_args(p_read)
    p_read.add_argument("--dir", dest="directory", default=config.default_data_dir(),
                        help="Directory containing .ssp files")
    p_read.add_argument("--web", action="store_true",
                        help="Download from the MEPS website, skip the local directory")
    p_read.add_argument("--out", help="Write the table to this CSV path")
    p_read.add_argument("--head", type=int, default=5,
                        help="Rows to print when --out is not given")

    p_dl = sub.add_parser("download", help="Save a file's .ssp into a directory")
    _add_request_args(p_dl)
    p_dl.add_argument("--dir", dest="directory", default=config.default_data_dir())
    p_dl.add_argument("--force", action="store_true",
                      help="Download even if the file is already present")

    p_names = sub.add_parser("names", help="Look up standardized file names")
    p_names.add_argument("--year", type=int)
    p_names.add_argument("--type", dest="file_type")
    p_names.add_argument("--web", action="store_true",
                         help="Use the latest lookup table from the web")
    return parser


def _cmd_read(args):
    df = read_meps(args.identifier, args.year, args.file_type,
                   directory=args.directory, web=args.web)
    if args.out:
        df.to_csv(args.out, index=False)
        print(f"Wrote {len(df)} rows x {len(df.columns)} columns to {args.out}")
    else:
        print(f"{len(df)} rows x {len(df.columns)} columns")
        print(df.head(args.head).to_string())


def _cmd_download(args):
    identifier = resolve(make_request(args.identifier, args.year, args.file_type))
    path = download_ssp(identifier, args.directory, force=args.force)
    print(path)


def _cmd_names(args):
    if args.year is None and args.file_type is None:
        print("Please specify --year and/or --type.", file=sys.stderr)
        return 2
    names = get_puf_names(args.year, args.file_type, web=args.web)
    if isinstance(names, str):
        print(names)
        return
    for key, value in names.items():
        print(f"{key}\t{value}")


COMMANDS = {
    "read": _cmd_read,
    "download": _cmd_download,
    "names": _cmd_names,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        return COMMANDS[args.command](args) or 0
    except MEPSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
