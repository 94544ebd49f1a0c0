"""
DSL Runtime - Evaluator for hyperdraw call descriptors.

This module provides:
- Value: Tagged runtime values (none, number, string, struct)
- ScopeStack / ExecutionContext: Variable scopes and drawing state
- Argument binding and coercion helpers used by every built-in
- BuiltinRegistry: Built-in function implementations
- Curve samplers: curve_angle and curve_distance
- Interpreter: Expression evaluation and function dispatch
"""

from .values import (
    Value,
    ValueKind,
    STRUCT_SCHEMAS,
    none_val,
    number_val,
    string_val,
    struct_val,
    pol_val,
)

from .context import (
    HIDDEN_VARIABLE,
    Scope,
    ScopeStack,
    HiddenVariable,
    ExecutionContext,
    create_context,
)

from .binder import (
    interpret_arguments_from_function_call,
    number_value_for_parameter,
    string_value_for_parameter,
    pol_value_for_parameter,
)

from .samplers import (
    adaptive_samples,
    curve_angle,
    curve_distance,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
    get_builtin_registry,
)

from .interpreter import (
    Interpreter,
    CallResult,
    RunResult,
    execute,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'STRUCT_SCHEMAS',
    'none_val',
    'number_val',
    'string_val',
    'struct_val',
    'pol_val',

    # Context
    'HIDDEN_VARIABLE',
    'Scope',
    'ScopeStack',
    'HiddenVariable',
    'ExecutionContext',
    'create_context',

    # Binding
    'interpret_arguments_from_function_call',
    'number_value_for_parameter',
    'string_value_for_parameter',
    'pol_value_for_parameter',

    # Samplers
    'adaptive_samples',
    'curve_angle',
    'curve_distance',

    # Builtins
    'BuiltinFunction',
    'BuiltinRegistry',
    'get_builtin_registry',

    # Interpreter
    'Interpreter',
    'CallResult',
    'RunResult',
    'execute',
]
