"""
tinysexp - Main Entry Point
Reads one S-expression, shows the parsed tree and its evaluation
"""

import sys
import argparse
from typing import List, Optional

from error_handling import DiagnosticLog, SexpError
from interpreter import create_interpreter
from parsing import create_parser
from values import pretty_print_tree, print_form


DEMO_SOURCE = "(+ 2 (+ 30 10))"
VERSION = "tinysexp v0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='tinysexp - read and evaluate a prefix-notation S-expression',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                        # Evaluate the demonstration expression
  %(prog)s "(+ 1 2 3)"            # Evaluate an expression
  %(prog)s --tokens "(+ 1 2)"     # Also list the tokens
  %(prog)s --strict "(+ 1 2"      # Fail on unbalanced brackets
        """
  )

  parser.add_argument(
      'source',
      nargs='?',
      default=DEMO_SOURCE,
      help=f'Expression to evaluate (default: "{DEMO_SOURCE}")'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Show the token sequence'
  )

  parser.add_argument(
      '--tree',
      action='store_true',
      help='Show the parsed tree, one node per line'
  )

  parser.add_argument(
      '--strict',
      action='store_true',
      help='Reject unknown characters, bad integers and unbalanced brackets'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def run_source(source: str, show_tokens: bool = False, show_tree: bool = False,
               strict: bool = False, debug: bool = False) -> None:
  """Read, print and evaluate one expression"""
  parser = create_parser(debug=debug, strict=strict, echo=True)
  interpreter = create_interpreter(debug=debug)

  print(f"Source:\n{source}\n")

  result = parser.parse_string(source)

  if show_tokens:
    print("Tokens:")
    for token in result.tokens:
      print(token)
    print()

  if show_tree:
    print(pretty_print_tree(result.root))

  print(f"READ: {print_form(result.root)}")
  evaluated = interpreter.evaluate(result.root, DiagnosticLog(source, echo=True))
  print(f"EVAL: {print_form(evaluated.value)}")


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for tinysexp"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  try:
    run_source(
        args.source,
        show_tokens=args.tokens,
        show_tree=args.tree,
        strict=args.strict,
        debug=args.debug
    )
  except SexpError as e:
    print(f"Error: {e}")
    sys.exit(1)


if __name__ == "__main__":
  main()
