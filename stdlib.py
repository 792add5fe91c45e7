"""
tinysexp Standard Library
Builtin operations dispatched by name from the head of a list
"""

from typing import Callable, Dict, Generator, List, Optional

from error_handling import ErrorKind, EvalResult
from values import SInt, SObject


# ============================================================================
# BUILTIN OPERATIONS
# ============================================================================

def builtin_plus(args: List[SObject], context: Dict) -> Generator[SObject, EvalResult, EvalResult]:
  """
  Sum the evaluated arguments.

  Each argument is yielded back to the interpreter, which sends its
  EvalResult in, so nesting never grows the Python stack.

  Every argument must evaluate to an Int. The first one that does not
  abandons the sum: the partial total is discarded and Int(0) comes back
  as the sentinel, carrying a type-mismatch error. An argument whose own
  evaluation failed passes its error through unchanged.
  """
  log = context['log']

  if not args:
    log.warn(ErrorKind.NO_ARGUMENTS, "No arguments")
    return EvalResult(SInt(0))

  total = 0
  for arg in args:
    result = yield arg
    if not result.ok:
      return EvalResult(SInt(0), result.error)
    if not isinstance(result.value, SInt):
      error = log.report(
          ErrorKind.TYPE_MISMATCH,
          f"Illegal result type: {result.value.to_string()}"
      )
      return EvalResult(SInt(0), error)
    total += result.value.value

  return EvalResult(SInt(total))


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

def make_builtin_function(name: str, func: Callable, type_signature: str = "") -> Dict:
  """Create a built-in function record"""
  return {
      'type': 'builtin_function',
      'name': name,
      'func': func,
      'type_signature': type_signature
  }


BUILTIN_FUNCTIONS: Dict[str, Dict] = {
    "+": make_builtin_function("+", builtin_plus, "Int* -> Int"),
}


def create_builtin_table(extra: Optional[Dict[str, Dict]] = None) -> Dict[str, Dict]:
  """Fresh builtin table, optionally extended or overridden by `extra`"""
  table = dict(BUILTIN_FUNCTIONS)
  if extra:
    table.update(extra)
  return table


def register_builtin(table: Dict[str, Dict], name: str, func: Callable, type_signature: str = "") -> Dict:
  """Add a builtin to a table without touching the evaluator"""
  builtin = make_builtin_function(name, func, type_signature)
  table[name] = builtin
  return builtin


def get_builtin_function(table: Dict[str, Dict], name: str) -> Optional[Dict]:
  """Look up a builtin by exact name"""
  return table.get(name)
