"""
Argument binding and type coercion for built-in functions.

Built-ins ask the binder to evaluate some or all of a call's argument
expressions into Values, then coerce each bound Value into the native
type they need. Partial binding lets a built-in evaluate structural
parameters first and re-evaluate another one once per sample point.
"""

from typing import TYPE_CHECKING, Dict, Iterable, Optional

from .values import Value, ValueKind, POL_TYPE
from ..ast import FunctionCall
from ..errors import ArgumentError
from ...pol import Pol

if TYPE_CHECKING:
    from .interpreter import Interpreter


def interpret_arguments_from_function_call(
    interpreter: "Interpreter",
    function_call: FunctionCall,
    bindings: Dict[str, Value],
    subset: Optional[Iterable[str]] = None,
) -> Dict[str, Value]:
    """
    Evaluate argument expressions of ``function_call`` into ``bindings``.

    Only the parameters named in ``subset`` are evaluated; when ``subset``
    is empty or None every supplied argument is. Requested parameters the
    call does not supply are skipped, leaving the coercion step to report
    them as missing. Evaluation errors propagate; a parameter whose
    expression fails is never bound.

    Returns ``bindings`` for convenience.
    """
    seen = set()
    for name in function_call.argument_names:
        if name in seen:
            raise ArgumentError(
                f"Duplicate argument '{name}' in call to function '{function_call.name}'.",
                function_call.span)
        seen.add(name)

    if subset:
        requested = list(subset)
    else:
        requested = function_call.argument_names

    for name in requested:
        argument = function_call.argument(name)
        if argument is None:
            continue
        value = interpreter.evaluate(argument.value)
        bindings[name] = value
    return bindings


def _bound_value(function_name: str, parameter: str, bindings: Dict[str, Value]) -> Value:
    value = bindings.get(parameter)
    if value is None:
        raise ArgumentError(
            f"Missing argument '{parameter}' in call to function '{function_name}'.")
    return value


def _mismatch(function_name: str, parameter: str, expected: str, value: Value) -> ArgumentError:
    return ArgumentError(
        f"Invalid argument '{parameter}' in call to function '{function_name}'. "
        f"Expected a value of type '{expected}' but got '{value.type_name}'.")


def number_value_for_parameter(function_name: str, parameter: str,
                               bindings: Dict[str, Value]) -> float:
    """Return the bound value of ``parameter`` as a float."""
    value = _bound_value(function_name, parameter, bindings)
    if value.kind != ValueKind.NUMBER:
        raise _mismatch(function_name, parameter, "number", value)
    return value.data


def string_value_for_parameter(function_name: str, parameter: str,
                               bindings: Dict[str, Value]) -> str:
    """Return the bound value of ``parameter`` as a str."""
    value = _bound_value(function_name, parameter, bindings)
    if value.kind != ValueKind.STRING:
        raise _mismatch(function_name, parameter, "string", value)
    return value.data


def pol_value_for_parameter(function_name: str, parameter: str,
                            bindings: Dict[str, Value]) -> Pol:
    """Return the bound value of ``parameter`` as a Pol point."""
    value = _bound_value(function_name, parameter, bindings)
    if value.kind != ValueKind.STRUCT or value.type_tag != POL_TYPE:
        raise _mismatch(function_name, parameter, POL_TYPE, value)
    coords = {}
    for prop in ("r", "phi"):
        component = value.data.get(prop)
        if component is None or component.kind != ValueKind.NUMBER:
            actual = "missing" if component is None else component.type_name
            raise ArgumentError(
                f"Invalid argument '{parameter}' in call to function '{function_name}'. "
                f"Property '{prop}' of a '{POL_TYPE}' must be a number but was '{actual}'.")
        coords[prop] = component.data
    return Pol(coords["r"], coords["phi"])
