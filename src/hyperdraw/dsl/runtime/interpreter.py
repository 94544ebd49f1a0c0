"""
Tree-walking evaluator for hyperdraw scripts.

Evaluates expressions against the scope stack and dispatches function
calls to the built-in registry. No exception leaves ``call_function``:
a failing call reports its diagnostic once and returns a failed
CallResult, so the caller decides how to continue.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import logging

from .values import (
    Value, ValueKind,
    number_val, string_val, struct_val,
)
from .context import ExecutionContext, create_context
from .builtins import BuiltinFunction, BuiltinRegistry, get_builtin_registry
from ..ast import (
    Expression, Literal, Identifier, MemberAccess, UnaryOp, BinaryOp,
    StructLiteral, FunctionCall,
    Statement, Assignment, ExpressionStatement,
)
from ..errors import ArgumentError, CallFailed, DomainError, EvaluationError

logger = logging.getLogger(__name__)


@dataclass
class CallResult:
    """Outcome of a function call."""
    success: bool
    value: Optional[Value] = None


@dataclass
class RunResult:
    """Outcome of running a sequence of statements."""
    success: bool
    executed: int = 0
    failures: List[int] = field(default_factory=list)  # indices of failed statements


class Interpreter:
    """
    Evaluates expressions and function calls against an ExecutionContext.
    """

    def __init__(self, context: Optional[ExecutionContext] = None,
                 registry: Optional[BuiltinRegistry] = None):
        self.context = context if context is not None else create_context()
        self.registry = registry if registry is not None else get_builtin_registry()

    # --- Function dispatch ---

    def call_function(self, function_call: FunctionCall) -> CallResult:
        """
        Dispatch a call descriptor to its built-in.

        Returns CallResult(True, value) on success. On failure the error
        has been reported through the context and CallResult(False) is
        returned.
        """
        logger.debug("Interpreting %s.", function_call.name)
        try:
            func = self.registry.get_function(function_call.name)
            if func is None:
                raise EvaluationError(
                    f"Unknown function '{function_call.name}'.", function_call.span)
            self._check_extraneous_arguments(func, function_call)
            value = func.implementation(self, function_call)
            if not isinstance(value, Value):
                raise EvaluationError(
                    f"Function '{function_call.name}' did not produce a result.",
                    function_call.span)
        except CallFailed:
            return CallResult(False)
        except EvaluationError as e:
            self._report(e, function_call)
            return CallResult(False)
        except (ArithmeticError, ValueError) as e:
            # Geometry on very large coordinates overflows inside math
            logger.debug("'%s' failed numerically: %r", function_call.name, e)
            self._report(DomainError(
                f"Could not interpret '{function_call.name}'. "
                f"The value could not be computed: {e}.",
                function_call.span), function_call)
            return CallResult(False)
        return CallResult(True, value)

    def _check_extraneous_arguments(self, func: BuiltinFunction,
                                    function_call: FunctionCall) -> None:
        extraneous = [name for name in function_call.argument_names
                      if name not in func.parameters]
        if not extraneous:
            return
        if not func.parameters:
            raise ArgumentError(
                f"Extraneous argument in call to function '{function_call.name}'. "
                "This function does not take any arguments.",
                function_call.span)
        raise ArgumentError(
            f"Extraneous argument '{extraneous[0]}' in call to function "
            f"'{function_call.name}'. Expected parameters: {', '.join(func.parameters)}.",
            function_call.span)

    def _report(self, error: EvaluationError, fallback: Optional[object] = None) -> None:
        span = error.diagnostic.span
        if span is None and fallback is not None:
            span = getattr(fallback, "span", None)
        self.context.print_error_message(error.message, error.code, span)

    # --- Expression evaluation ---

    def evaluate(self, expr: Expression) -> Value:
        """
        Evaluate an expression to a Value.

        Raises EvaluationError on failure; a failed nested call raises
        CallFailed after its diagnostic has been reported.
        """
        if isinstance(expr, Literal):
            return self._eval_literal(expr)
        if isinstance(expr, Identifier):
            value = self.context.get_variable(expr.name)
            if value is None:
                raise EvaluationError(f"Undefined variable '{expr.name}'.", expr.span)
            return value
        if isinstance(expr, MemberAccess):
            return self.evaluate(expr.object).get_property(expr.member)
        if isinstance(expr, UnaryOp):
            return self._eval_unary(expr)
        if isinstance(expr, BinaryOp):
            return self._eval_binary(expr)
        if isinstance(expr, StructLiteral):
            return self._eval_struct(expr)
        if isinstance(expr, FunctionCall):
            result = self.call_function(expr)
            if not result.success:
                raise CallFailed(expr.name)
            return result.value
        raise EvaluationError(f"Cannot evaluate expression of type {type(expr).__name__}.")

    def _eval_literal(self, expr: Literal) -> Value:
        if isinstance(expr.value, bool):
            raise EvaluationError(f"Unsupported literal {expr.value!r}.", expr.span)
        if isinstance(expr.value, (int, float)):
            return number_val(expr.value)
        if isinstance(expr.value, str):
            return string_val(expr.value)
        raise EvaluationError(f"Unsupported literal {expr.value!r}.", expr.span)

    def _eval_unary(self, expr: UnaryOp) -> Value:
        operand = self.evaluate(expr.operand)
        if expr.operator != "-":
            raise EvaluationError(f"Unknown unary operator '{expr.operator}'.", expr.span)
        if operand.kind != ValueKind.NUMBER:
            raise EvaluationError(
                f"Operator '-' cannot be applied to a value of type '{operand.type_name}'.",
                expr.span)
        return number_val(-operand.data)

    def _eval_binary(self, expr: BinaryOp) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator

        if op == "+" and left.kind == ValueKind.STRING and right.kind == ValueKind.STRING:
            return string_val(left.data + right.data)

        if left.kind != ValueKind.NUMBER or right.kind != ValueKind.NUMBER:
            raise EvaluationError(
                f"Operator '{op}' cannot be applied to values of type "
                f"'{left.type_name}' and '{right.type_name}'.",
                expr.span)
        a, b = left.data, right.data
        if op == "+":
            return number_val(a + b)
        if op == "-":
            return number_val(a - b)
        if op == "*":
            return number_val(a * b)
        if op == "/":
            if b == 0:
                raise EvaluationError("Division by zero.", expr.span)
            return number_val(a / b)
        raise EvaluationError(f"Unknown binary operator '{op}'.", expr.span)

    def _eval_struct(self, expr: StructLiteral) -> Value:
        properties = {}
        for arg in expr.fields:
            if arg.name in properties:
                raise ArgumentError(
                    f"Duplicate property '{arg.name}' in construction of type "
                    f"'{expr.type_name}'.", expr.span)
            properties[arg.name] = self.evaluate(arg.value)
        return struct_val(expr.type_name, properties)

    # --- Statements ---

    def execute_statement(self, stmt: Statement) -> bool:
        """Execute one statement. Returns False if it failed (already reported)."""
        try:
            if isinstance(stmt, Assignment):
                self.context.set_variable(stmt.name, self.evaluate(stmt.value))
                return True
            if isinstance(stmt, ExpressionStatement):
                if isinstance(stmt.expression, FunctionCall):
                    return self.call_function(stmt.expression).success
                self.evaluate(stmt.expression)
                return True
            raise EvaluationError(f"Cannot execute statement of type {type(stmt).__name__}.")
        except CallFailed:
            return False
        except EvaluationError as e:
            self._report(e, stmt)
            return False

    def run(self, statements: Iterable[Statement], stop_on_error: bool = True) -> RunResult:
        """
        Execute statements in order.

        With ``stop_on_error`` the run ends at the first failing statement;
        otherwise later statements still execute.
        """
        result = RunResult(success=True)
        for index, stmt in enumerate(statements):
            result.executed += 1
            if not self.execute_statement(stmt):
                result.success = False
                result.failures.append(index)
                if stop_on_error:
                    break
        return result


def execute(statements: Iterable[Statement], context: Optional[ExecutionContext] = None,
            stop_on_error: bool = True) -> RunResult:
    """Run statements in a (fresh, unless given) context."""
    return Interpreter(context).run(statements, stop_on_error=stop_on_error)
