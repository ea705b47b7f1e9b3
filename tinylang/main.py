"""Runs .tiny files, or the interactive shell when no file is given. Also sets up the error handling context manager.
Called from the tiny console script.
"""

import argparse
import logging
import sys

from tinylang.grammar.tiny import EQUAL_LEXEMES
from tinylang.lang.error import ErrorHandler
from tinylang.lang.session import Session
from tinylang.lang.shell import Shell
from tinylang.lang.streams import IterInput


BANNER = "{0} {1} {0}\n"


def build_parser():
    parser = argparse.ArgumentParser(prog="tiny", description="TINY language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the token listing before running")
    parser.add_argument("--tree", action="store_true", help="print the syntax tree before running")
    parser.add_argument("--symbols", action="store_true", help="print the symbol table before running")
    parser.add_argument("--equal", choices=EQUAL_LEXEMES, default="=", help="equality operator lexeme")
    parser.add_argument("--input", nargs="+", metavar="N", help="values for read statements, in order")
    parser.add_argument("--verbose", action="store_true", help="log each stage and statement to stderr")
    return parser


def main(argv=None):
    """Runs the TINY interpreter. Returns the exit status."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    input_source = IterInput(args.input) if args.input is not None else None

    with ErrorHandler() as error_handler:
        if args.file is None:
            Shell(error_handler, equal=args.equal, input_source=input_source).cmdloop()
            return 0

        sess = Session(error_handler, args.file, equal=args.equal, input_source=input_source)

        if args.tokens:
            print(BANNER.format("+" * 22, "Tokens"))
            print("\n".join(token.display() for token in sess.tokens()) + "\n")
        if args.tree:
            print(BANNER.format("+" * 22, "Syntax Tree"))
            print(sess.parse().display() + "\n")
        if args.symbols:
            print(BANNER.format("+" * 21, "Symbol Table"))
            print(sess.resolve().display() + "\n")
        if args.tokens or args.tree or args.symbols:
            print(BANNER.format("+" * 17, "Executing The Program"))

        sess.run()
        sess.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
