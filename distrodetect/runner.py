"""Command-line entry point.

    distro-detect [--format FORMAT] [--fields id,name,...] [--fsroot PATH]
    python3 -m distrodetect.runner --format json

Exit codes: 0 on success, 1 when settings cannot be loaded or the result
cannot be written, 2 on invalid arguments.
"""

import argparse
import os
import sys

from distrodetect import __version__
from distrodetect.classifier import Classifier
from distrodetect.filesource import FileSource
from distrodetect.logging import DetectLogger
from distrodetect.output import FORMATS, render, select_fields
from distrodetect.settings import DetectSettings, SettingsError


def validate_directory(path: str) -> str:
    """Validate that the filesystem root is an existing directory."""
    if not os.path.isdir(path):
        raise argparse.ArgumentTypeError(f"Not a directory: {path}")
    return path


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="distro-detect",
        description="Detect the Linux distribution of this system or a mounted image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  distro-detect
  distro-detect --format json
  distro-detect --fields id,version --format text-no-labels
  distro-detect --fsroot /mnt/image
        """
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"distro-detect v{__version__}"
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--fields",
        type=str,
        default=None,
        help="Fields to output (comma separated): name, id, version, lsb_release, os_release"
    )
    parser.add_argument(
        "--fsroot",
        type=validate_directory,
        default=None,
        help="Path to the root of the filesystem in which to detect the distro (default: /)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON settings file; flags given on the command line take precedence"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Log detector activity to stderr"
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=None,
        help="Diagnostic output format on stderr (default: text)"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    log = DetectLogger()

    try:
        settings = DetectSettings.from_file(args.config) if args.config else DetectSettings()
    except SettingsError as e:
        log.error(str(e))
        return 1

    log.verbose = args.verbose if args.verbose is not None else settings.boolean("verbose")
    log_format = args.log_format or settings.string("log_format", "text")
    log.json_lines = log_format == "json"

    fmt = args.format or settings.string("format", "text")
    if fmt not in FORMATS:
        log.error(f"Invalid format '{fmt}'. Must be one of: {FORMATS}")
        return 1

    if args.fields is not None:
        fields = [f for f in args.fields.split(",") if f.strip()]
    else:
        fields = settings.string_list("fields")

    # An empty selection means every field
    if not fields:
        fields = None
    else:
        _, unknown = select_fields(fields)
        for name in unknown:
            log.warn(f"ignoring unknown field: {name}")

    root = args.fsroot or settings.string("fsroot", os.sep)
    if not os.path.isdir(root):
        log.error(f"filesystem root is not a directory: {root}")
        return 1

    files = FileSource(root=root, log=log)
    distro = Classifier(files=files, log=log).discover()

    try:
        render(distro, fmt, sys.stdout, fields=fields)
        sys.stdout.flush()
    except OSError as e:
        log.error(f"unable to write result: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
