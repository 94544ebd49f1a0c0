"""
hyperdraw DSL evaluator.

This module provides:
- AST: Call descriptors and expression nodes produced by a front end
- Errors: Diagnostics and the evaluator's exception hierarchy
- Runtime: Values, scopes, argument binding, built-ins and dispatch

Usage:
    from hyperdraw.dsl import Interpreter, create_context, call, pol

    ctx = create_context(resolution=50)
    interp = Interpreter(ctx)
    interp.call_function(call("line", {"from": pol(0.0), "to": pol(2.0, 1.0)}))
    ctx.canvas.save_to_file("drawing.dxf")
"""

from .ast import (
    SourceLocation,
    SourceSpan,
    Expression,
    Literal,
    Identifier,
    MemberAccess,
    UnaryOp,
    BinaryOp,
    Argument,
    StructLiteral,
    FunctionCall,
    Statement,
    Assignment,
    ExpressionStatement,
    call,
    pol,
)

from .errors import (
    Diagnostic,
    DiagnosticCollector,
    DslError,
    EvaluationError,
    ArgumentError,
    DomainError,
    ScopeError,
    CallFailed,
)

from .runtime import (
    Value,
    ValueKind,
    ScopeStack,
    ExecutionContext,
    create_context,
    BuiltinRegistry,
    get_builtin_registry,
    Interpreter,
    CallResult,
    RunResult,
    execute,
)

__all__ = [
    # AST
    'SourceLocation',
    'SourceSpan',
    'Expression',
    'Literal',
    'Identifier',
    'MemberAccess',
    'UnaryOp',
    'BinaryOp',
    'Argument',
    'StructLiteral',
    'FunctionCall',
    'Statement',
    'Assignment',
    'ExpressionStatement',
    'call',
    'pol',

    # Errors
    'Diagnostic',
    'DiagnosticCollector',
    'DslError',
    'EvaluationError',
    'ArgumentError',
    'DomainError',
    'ScopeError',
    'CallFailed',

    # Runtime
    'Value',
    'ValueKind',
    'ScopeStack',
    'ExecutionContext',
    'create_context',
    'BuiltinRegistry',
    'get_builtin_registry',
    'Interpreter',
    'CallResult',
    'RunResult',
    'execute',
]
