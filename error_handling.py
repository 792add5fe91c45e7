"""
Diagnostics and error handling for tinysexp
Data errors are recorded as immutable dictionaries and absorbed locally;
exceptions are only raised in strict mode
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from parsing import SourceSpan


# ============================================================================
# ERROR KINDS
# ============================================================================

class ErrorKind(str, Enum):
    """Every condition the pipeline can report"""
    UNKNOWN_CHARACTER = "unknown-character"
    BAD_INTEGER = "bad-integer"
    UNEXPECTED_CLOSE = "unexpected-close"
    UNCLOSED_LIST = "unclosed-list"
    UNKNOWN_NAME = "unknown-name"
    TYPE_MISMATCH = "type-mismatch"
    EMPTY_LIST = "empty-list"
    NESTING_TOO_DEEP = "nesting-too-deep"
    NO_ARGUMENTS = "no-arguments"


ERROR = "error"
WARNING = "warning"

SEVERITY_MARKERS = {
    ERROR: "=ERR=",
    WARNING: "=WARN=",
}


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_diagnostic(
    kind: ErrorKind,
    message: str,
    span: Optional['SourceSpan'] = None,
    severity: str = ERROR,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable diagnostic structure"""
    return {
        'kind': kind,
        'message': message,
        'span': span,
        'severity': severity,
        'context': context,
    }


def format_diagnostic(diagnostic: Dict) -> str:
    """Format a diagnostic as plain text, prefixed with its severity marker"""
    marker = SEVERITY_MARKERS.get(diagnostic['severity'], "=ERR=")
    text = f"{marker} {diagnostic['message']}"

    if diagnostic['span']:
        text += f"\n  at {diagnostic['span']}"

    if diagnostic['context']:
        text += f"\n{diagnostic['context']}"

    return text


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around a location, with a caret under the column"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^")

    return '\n'.join(context_parts)


# ============================================================================
# DIAGNOSTIC COLLECTION
# ============================================================================

class DiagnosticLog:
    """Collects diagnostics for one run and optionally echoes them to stdout"""

    def __init__(self, source_text: str = "", echo: bool = False):
        self.source_text = source_text
        self.echo = echo
        self.entries: List[Dict] = []

    def report(
        self,
        kind: ErrorKind,
        message: str,
        span: Optional['SourceSpan'] = None,
        severity: str = ERROR
    ) -> Dict:
        context = None
        if span is not None and self.source_text:
            context = get_context_lines(self.source_text, span.start_line, span.start_col)

        diagnostic = make_diagnostic(kind, message, span, severity, context)
        self.entries.append(diagnostic)
        if self.echo:
            print(format_diagnostic(diagnostic))
        return diagnostic

    def warn(self, kind: ErrorKind, message: str, span: Optional['SourceSpan'] = None) -> Dict:
        return self.report(kind, message, span, severity=WARNING)

    @property
    def errors(self) -> List[Dict]:
        return [d for d in self.entries if d['severity'] == ERROR]

    @property
    def warnings(self) -> List[Dict]:
        return [d for d in self.entries if d['severity'] == WARNING]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def kinds(self) -> List[ErrorKind]:
        return [d['kind'] for d in self.entries]


# ============================================================================
# EVALUATION RESULTS
# ============================================================================

@dataclass(frozen=True)
class EvalResult:
    """
    Outcome of evaluating one value.

    On failure `error` holds the diagnostic and `value` holds the
    sentinel shown in the print-form output (String("ERR") or Int(0)).
    """
    value: Any
    error: Optional[Dict] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error['kind'] if self.error else None


# ============================================================================
# EXCEPTIONS (strict mode)
# ============================================================================

class SexpError(Exception):
    """Base class for tinysexp errors raised in strict mode"""

    def __init__(self, diagnostic: Dict):
        self.diagnostic = diagnostic
        self.kind = diagnostic['kind']
        self.message = diagnostic['message']
        self.span = diagnostic['span']
        super().__init__(format_diagnostic(diagnostic))


class SexpTokenizerError(SexpError):
    """Unrecognized character in strict mode"""
    pass


class SexpParseError(SexpError):
    """Malformed integer or unbalanced brackets in strict mode"""
    pass
