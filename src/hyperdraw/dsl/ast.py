"""
Expression and call-descriptor nodes consumed by the hyperdraw evaluator.

A front end produces these nodes; the evaluator only ever asks for an
expression to be evaluated against the current scope store. The most
important node is ``FunctionCall``, the call descriptor: a function name
plus an ordered list of named argument expressions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class SourceLocation:
    """A position in script source (1-based line and column)."""
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """A range in script source."""
    start: SourceLocation
    end: SourceLocation


# =============================================================================
# Expressions
# =============================================================================

@dataclass
class Expression:
    """Base class for expression nodes."""


@dataclass
class Literal(Expression):
    """A number or string literal."""
    value: Union[int, float, str]
    span: Optional[SourceSpan] = None


@dataclass
class Identifier(Expression):
    """A variable reference."""
    name: str
    span: Optional[SourceSpan] = None


@dataclass
class MemberAccess(Expression):
    """Property access on a struct value (e.g., _p.r)."""
    object: Expression
    member: str
    span: Optional[SourceSpan] = None


@dataclass
class UnaryOp(Expression):
    """Numeric negation."""
    operator: str
    operand: Expression
    span: Optional[SourceSpan] = None


@dataclass
class BinaryOp(Expression):
    """Arithmetic (+, -, *, /); + also concatenates strings."""
    left: Expression
    operator: str
    right: Expression
    span: Optional[SourceSpan] = None


@dataclass
class Argument:
    """A named argument in a call or struct literal."""
    name: str
    value: Expression


@dataclass
class StructLiteral(Expression):
    """A struct constructor, e.g. Pol(r: 1, phi: 0)."""
    type_name: str
    fields: List[Argument] = field(default_factory=list)
    span: Optional[SourceSpan] = None


@dataclass
class FunctionCall(Expression):
    """A call descriptor: function name plus named argument expressions."""
    name: str
    arguments: List[Argument] = field(default_factory=list)
    span: Optional[SourceSpan] = None

    @property
    def argument_names(self) -> List[str]:
        return [arg.name for arg in self.arguments]

    def argument(self, name: str) -> Optional[Argument]:
        """Return the argument supplied for ``name``, if any."""
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None


# =============================================================================
# Statements
# =============================================================================

@dataclass
class Statement:
    """Base class for statement nodes."""


@dataclass
class Assignment(Statement):
    """Bind the value of an expression to a variable name."""
    name: str
    value: Expression
    span: Optional[SourceSpan] = None


@dataclass
class ExpressionStatement(Statement):
    """Evaluate an expression for its effect (usually a function call)."""
    expression: Expression
    span: Optional[SourceSpan] = None


# Convenience builders, mainly for front ends and tests

def _expr(x) -> Expression:
    return x if isinstance(x, Expression) else Literal(x)


def call(name: str, arguments: Optional[Dict[str, object]] = None, **more) -> FunctionCall:
    """
    Build a call descriptor. Argument order is preserved; plain numbers
    and strings are wrapped as literals. Names that are Python keywords
    (``from``) go in the ``arguments`` dict.
    """
    merged = dict(arguments or {})
    merged.update(more)
    return FunctionCall(name, [Argument(k, _expr(v)) for k, v in merged.items()])


def pol(r, phi=0.0) -> StructLiteral:
    """Build a ``Pol(r: .., phi: ..)`` struct literal."""
    return StructLiteral("Pol", [Argument("r", _expr(r)), Argument("phi", _expr(phi))])
