"""
Diagnostics and exceptions for the hyperdraw evaluator.

Error code ranges:
- E401: Argument-shape errors (missing, extraneous, mistyped arguments)
- E402: Domain-validity errors (geometric or numeric preconditions)
- E403: State-discipline errors (scope stack misuse)
- E404: Evaluation errors (undefined names, operand types)
"""

from dataclasses import dataclass
from typing import List, Optional

from .ast import SourceSpan


@dataclass
class Diagnostic:
    """A single reported error."""
    code: str
    message: str
    span: Optional[SourceSpan] = None

    def format(self) -> str:
        """Format the diagnostic for display."""
        header = f"error[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        return header


class DslError(Exception):
    """Base exception for DSL errors."""

    code = "E400"

    def __init__(self, message: str, span: Optional[SourceSpan] = None):
        self.diagnostic = Diagnostic(code=self.code, message=message, span=span)
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.diagnostic.message


class EvaluationError(DslError):
    """Error raised while evaluating an expression or a built-in (E404)."""
    code = "E404"


class ArgumentError(EvaluationError):
    """Missing, extraneous or mistyped argument (E401)."""
    code = "E401"


class DomainError(EvaluationError):
    """A geometric or numeric precondition was violated (E402)."""
    code = "E402"


class ScopeError(EvaluationError):
    """The scope stack was used out of order (E403)."""
    code = "E403"


class CallFailed(EvaluationError):
    """
    A nested function call failed and its diagnostic has already been
    reported. Raised to abort the enclosing expression chain.
    """

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"call to function '{function_name}' failed")



class DiagnosticCollector:
    """Collects diagnostics during evaluation."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]
