"""
tinysexp Interpreter
Evaluator over the value tree; every call returns an EvalResult
"""

import inspect
from typing import Any, Dict, List, Optional

from error_handling import DiagnosticLog, ErrorKind, EvalResult
from stdlib import create_builtin_table, get_builtin_function
from values import SList, SName, SObject, SString, SInt, is_atom, print_form


def make_execution_context(
    builtins: Optional[Dict[str, Dict]] = None,
    log: Optional[DiagnosticLog] = None,
    debug: bool = False
) -> Dict:
  """Create the execution context threaded through every evaluation call"""
  return {
      'builtins': builtins if builtins is not None else create_builtin_table(),
      'log': log if log is not None else DiagnosticLog(),
      'debug': debug,
      'evaluate': eval_value,
  }


def eval_step(value: SObject, context: Dict) -> Any:
  """
  Evaluate one value as far as possible without evaluating arguments.

  Returns an EvalResult, or a suspended builtin generator that yields the
  arguments it needs evaluated. Atoms, including bare names, evaluate to
  themselves.
  """
  if context['debug']:
    print(f"Evaluating: {print_form(value)}")

  if is_atom(value):
    return EvalResult(value)

  log = context['log']

  # A list whose head is a list is replaced by that head; remaining siblings are discarded
  node = value
  while node.items and isinstance(node.items[0], SList):
    node = node.items[0]

  if not node.items:
    error = log.report(ErrorKind.EMPTY_LIST, "Cannot evaluate an empty list")
    return EvalResult(SString("ERR"), error)

  head = node.items[0]
  if isinstance(head, SName):
    builtin = get_builtin_function(context['builtins'], head.name)
    if builtin is None:
      error = log.report(ErrorKind.UNKNOWN_NAME, f"Unknown name '{head.name}'")
      return EvalResult(SString("ERR"), error)
    return builtin['func'](node.items[1:], context)

  # Any other atom head leaves the list unevaluated
  return EvalResult(node)


def eval_value(value: SObject, context: Optional[Dict] = None) -> EvalResult:
  """
  Evaluate any value with an explicit stack of suspended builtins, so
  argument nesting depth is bounded by memory rather than the interpreter
  stack.
  """
  if context is None:
    context = make_execution_context()

  pending: List[Any] = []
  outcome = eval_step(value, context)

  while True:
    if inspect.isgenerator(outcome):
      pending.append(outcome)
      reply = None
    elif not pending:
      return outcome
    else:
      reply = outcome

    try:
      request = pending[-1].send(reply)
    except StopIteration as stop:
      pending.pop()
      outcome = stop.value
      continue

    outcome = eval_step(request, context)


def eval_list(lst: SList, context: Dict) -> EvalResult:
  """Evaluate a list: dispatch on its head"""
  return eval_value(lst, context)


def eval_program(root: SObject, context: Optional[Dict] = None) -> EvalResult:
  """Evaluate a whole tree, turning interpreter stack exhaustion into an error result"""
  if context is None:
    context = make_execution_context()

  try:
    return eval_value(root, context)
  except RecursionError:
    error = context['log'].report(ErrorKind.NESTING_TOO_DEEP, "Expression nested too deeply to evaluate")
    return EvalResult(SInt(0), error)


class SexpInterpreter:
  """Evaluator bound to one builtin table"""

  def __init__(self, debug: bool = False, builtins: Optional[Dict[str, Dict]] = None, echo: bool = False):
    self.debug = debug
    self.echo = echo
    self.builtins = create_builtin_table(builtins)

  def evaluate(self, value: SObject, log: Optional[DiagnosticLog] = None) -> EvalResult:
    if log is None:
      log = DiagnosticLog(echo=self.echo)
    context = make_execution_context(self.builtins, log, self.debug)
    return eval_program(value, context)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False, builtins: Optional[Dict[str, Dict]] = None,
                       echo: bool = False) -> SexpInterpreter:
  """Factory function returning an interpreter"""
  return SexpInterpreter(debug=debug, builtins=builtins, echo=echo)
