# tracepeg/tracepegc.py
"""tracepegc – tracepeg CLI

Examples
    $ tracepegc rules -D
    $ tracepegc parse --text "%1 = alloca i32, align 4"
    $ tracepegc parse --input prog.ll --grammar mypkg.grammar:Calc --factory mypkg.factory:CalcFactory

Commands
--------
- rules : record a grammar and print its rules (user, action and synthetic)
- parse : parse text or a file and print the resulting syntax tree

Grammar and factory default to the bundled LLVM IR example. With -D/--debug
the recording and parsing steps are logged to stderr.
"""

from __future__ import annotations
import argparse
import importlib
import logging
import pprint
import sys
from typing import Any, Optional

from .errors import IncompleteParse, NestingTooDeep, ParseFailed, TracepegError

DEFAULT_GRAMMAR = "tracepeg.llvm.grammar:LlvmIrGrammar"
DEFAULT_FACTORY = "tracepeg.llvm.factory:LlvmIrTreeFactory"

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load_object(target: str) -> Any:
    """'package.module:Name' -> object"""
    module_name, sep, attr = target.partition(":")
    if not sep or not attr:
        raise ValueError(f"expected 'module:Name', got {target!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ValueError(f"module {module_name!r} has no attribute {attr!r}")


def _build_parser(args):
    from .parser import Parser

    grammar_class = _load_object(args.grammar)
    factory = _load_object(args.factory)()
    return Parser(grammar_class, factory, root_rule=args.root, charset=args.charset)

# ------------------------------
# commands
# ------------------------------

def cmd_rules(args) -> int:
    try:
        parser = _build_parser(args)
    except (TracepegError, ValueError, ImportError) as e:
        _eprint("[GRAMMAR ERROR]", type(e).__name__, str(e))
        return 2

    model = parser.model
    for line in parser.describe_rules():
        print(line)
    print(f"[RULES OK] rules={len(parser.program.grammar.rules)} "
          f"user={len(model.user_rules)} actions={len(model.action_rules)} "
          f"synthetic={len(model.synthetic_kinds)} root={parser.program.grammar.start!r}")
    return 0


def cmd_parse(args) -> int:
    try:
        parser = _build_parser(args)
    except (TracepegError, ValueError, ImportError) as e:
        _eprint("[GRAMMAR ERROR]", type(e).__name__, str(e))
        return 2

    try:
        if args.text is not None:
            tree = parser.parse(args.text)
        else:
            tree = parser.parse_file(args.input)
    except ParseFailed as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 1
    except IncompleteParse as e:
        _eprint("[INCOMPLETE]", str(e))
        return 1
    except NestingTooDeep as e:
        _eprint("[TOO DEEP]", str(e))
        return 1
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    pprint.pprint(tree)
    return 0

# ------------------------------
# entry point
# ------------------------------

def _add_grammar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--grammar", default=DEFAULT_GRAMMAR, help="grammar class as module:Name")
    p.add_argument("--factory", default=DEFAULT_FACTORY, help="tree factory class as module:Name")
    p.add_argument("--root", help="root rule method name (default: first declared rule)")
    p.add_argument("--charset", default="utf-8", help="input file encoding")
    p.add_argument("-D", "--debug", action="store_true", help="log recording and parsing to stderr")


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="tracepegc", description="tracepeg grammar driver")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_rules = sub.add_parser("rules", help="record a grammar and print its rules")
    _add_grammar_args(p_rules)
    p_rules.set_defaults(func=cmd_rules)

    p_parse = sub.add_parser("parse", help="parse input and print the syntax tree")
    _add_grammar_args(p_parse)
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text")
    src_group.add_argument("--input", help="input file path")
    p_parse.set_defaults(func=cmd_parse)

    args = ap.parse_args(argv)
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
