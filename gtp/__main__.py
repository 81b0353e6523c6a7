#!/usr/bin/env python3

"""gtp -- grammar to parser.

Build a parser from a grammar description and run it on some input.
"""

from __future__ import annotations  # Requires Python 3.7 or later

import argparse
import json
import pprint
import sys
import time
import traceback

from typing import Final, List, Optional, Tuple

import yaml

from gtp.build import build_grammar_from_file, build_parser
from gtp.grammar import GrammarError, ParseOptions
from gtp.parser import ParseError
from gtp.tree_visualizer import ASTTreePrinter


def print_memstats() -> bool:
    MiB: Final = 2 ** 20
    try:
        import psutil  # type: ignore
    except ImportError:
        return False
    print("Memory stats:")
    process = psutil.Process()
    meminfo = process.memory_info()
    res = {}
    res['rss'] = meminfo.rss / MiB
    res['vms'] = meminfo.vms / MiB
    if sys.platform == 'win32':
        res['maxrss'] = meminfo.peak_wset / MiB
    else:
        import resource  # Since it doesn't exist on Windows.
        rusage = resource.getrusage(resource.RUSAGE_SELF)
        if sys.platform == 'darwin':
            factor = 1
        else:
            factor = 1024  # Linux
        res['maxrss'] = rusage.ru_maxrss * factor / MiB
    for key, value in res.items():
        print(f"  {key:12.12s}: {value:10.0f} MiB")
    return True


argparser = argparse.ArgumentParser(prog='gtp', description="Parse input with a grammar written in the gtp notation")
argparser.add_argument('-q', '--quiet', action='store_true', help="Don't print the syntax tree")
argparser.add_argument('-v', '--verbose', action='count', default=0,
                       help="Print timing stats; repeat for more debug output")
argparser.add_argument('-o', '--output', choices=['json', 'yaml', 'yml', 'tree', 'pprint'], default='json',
                       help="How to print the syntax tree (default json)")
argparser.add_argument('--ignore-whitespace', action='store_true', help="Skip spaces between tokens")
argparser.add_argument('--ignore-newline', action='store_true', help="Skip newlines between tokens")
argparser.add_argument('--ignore-all', action='store_true', help="Same as --ignore-whitespace --ignore-newline")
argparser.add_argument('--bubble', action='store_true', help="Replace nodes with a single child by that child")
inputs = argparser.add_mutually_exclusive_group()
inputs.add_argument('-i', '--input-file', metavar='FILE', help="Read the input from FILE")
inputs.add_argument('--stdin', action='store_true', help="Read the input from stdin")
argparser.add_argument('grammar', help="Grammar description")
argparser.add_argument('input', nargs='?', help="Text to parse")


def read_input(args: argparse.Namespace) -> Optional[Tuple[str, str]]:
    if args.input_file:
        with open(args.input_file, encoding="utf-8") as file:
            return args.input_file, file.read()
    if args.stdin:
        return "<stdin>", sys.stdin.read()
    if args.input is not None:
        return "<input>", args.input
    return None


def main(argv: Optional[List[str]] = None) -> None:
    args = argparser.parse_args(argv)
    verbose = args.verbose
    verbose_tokenizer = verbose >= 3
    verbose_parser = verbose == 2 or verbose >= 4
    t0 = time.time()

    if args.input is not None and (args.input_file or args.stdin):
        argparser.error("give the input either as an argument or with -i/--stdin")

    try:
        grammar = build_grammar_from_file(args.grammar)
    except ParseError as err:
        traceback.print_exception(err.__class__, err, None)
        sys.exit(1)
    except GrammarError as err:
        print(f"ERROR: {args.grammar}: {err}", file=sys.stderr)
        sys.exit(1)

    source = read_input(args)
    if source is None:
        if not args.quiet:
            print(grammar)
        return
    filename, text = source

    grammar = grammar.with_options(
        ParseOptions(
            ignore_whitespace=args.ignore_whitespace or args.ignore_all,
            ignore_newline=args.ignore_newline or args.ignore_all,
            collapse=args.bubble,
        )
    )
    parser, tokenizer = build_parser(
        grammar,
        text,
        filename=filename,
        verbose_tokenizer=verbose_tokenizer,
        verbose_parser=verbose_parser,
    )
    try:
        tree = parser.start()
    except ParseError as err:
        traceback.print_exception(err.__class__, err, None)
        sys.exit(1)
    except GrammarError as err:
        print(f"ERROR: {args.grammar}: {err}", file=sys.stderr)
        sys.exit(1)

    t1 = time.time()

    if not args.quiet:
        if args.output == 'json':
            print(json.dumps(tree.to_dict(), indent=2))
        elif args.output in ('yaml', 'yml'):
            print(yaml.safe_dump(tree.to_dict(), sort_keys=False), end='')
        elif args.output == 'pprint':
            pprint.pprint(tree.to_dict(), indent=2)
        else:
            ASTTreePrinter().print_tree(tree)

    if args.verbose:
        dt = t1 - t0
        nlines = text.count("\n") + 1
        print(f"Total time: {dt:.3f} sec; {nlines} lines; {len(text)} characters", end="")
        if dt:
            print(f"; {nlines / dt:.0f} lines/sec")
        else:
            print()
        print("Sizes:")
        print(f"  token array : {len(tokenizer.tokens):10}")
        print(f"        rules : {len(grammar.rules):10}")
        print(f"        atoms : {len(grammar.atoms):10}")
        if not print_memstats():
            print("(Can't find psutil; install it for memory stats.)")


if __name__ == '__main__':
    main()
