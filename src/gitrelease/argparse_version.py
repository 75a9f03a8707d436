"""Provides a custom argparse action to show the program's version and exit."""

import sys as _sys
from argparse import SUPPRESS, Action

from .__about__ import __banner__, __version__


class VersionAction(Action):
    """Custom argparse action to show the program's version and exit."""

    def __init__(self, **kwargs):
        # Set default values if not provided in kwargs
        kwargs.setdefault("dest", SUPPRESS)
        kwargs.setdefault("default", SUPPRESS)
        kwargs.setdefault("nargs", 0)
        kwargs.setdefault("help", "show program's version number and exit")
        super().__init__(**kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        formatter = parser.formatter_class(prog=parser.prog)
        formatter.add_text(f"%(prog)s {__version__}")
        formatter.add_text(__banner__)
        _sys.stdout.write(formatter.format_help())
        parser.exit()
