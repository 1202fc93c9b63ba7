"""Runs forthlang on a source file, or in command-line mode. Also uses the error handling context manager. Called
through the forthlang console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from forthlang.lang.error import ErrorHandler
from forthlang.lang.session import Session
from forthlang.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="forthlang")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--prelude", help="startup definitions file, run before anything else")
    parser.add_argument("--max-depth", type=int, default=1024, help="maximum nesting of compiled words")
    parser.add_argument("--strict-immediate", action="store_true",
                        help="refuse to run immediate words outside of definitions")
    parser.add_argument("--fix-division", action="store_true", help="make '/' divide instead of multiply")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs forthlang interpreter. Called from forthlang console script."""
    assert sys.version_info >= (3, 7), "forthlang cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        args = parse_args(argv)
        options = {"max_depth": args.max_depth, "strict_immediate": args.strict_immediate,
                   "fix_division": args.fix_division}

        if args.file is not None:
            Session(error_handler, args.file, args.prelude, cmd_line=False, **options)

        else:
            Shell(Session(error_handler, Session.SH_FILE, args.prelude, cmd_line=True, **options)).cmdloop()


if __name__ == "__main__":
    main()
