"""
Built-in function registry for the hyperdraw evaluator.

Maps function names to implementations. Every implementation takes the
interpreter and the call descriptor, binds its arguments through the
argument binder, performs its effect and returns a Value (``none_val()``
when it has no result). Failures are raised as EvaluationError
subclasses; the interpreter turns them into reported diagnostics and a
failed CallResult.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
import math

from .binder import (
    interpret_arguments_from_function_call,
    number_value_for_parameter,
    string_value_for_parameter,
    pol_value_for_parameter,
)
from .samplers import curve_angle, curve_distance
from .values import Value, none_val, number_val, pol_val
from ..ast import FunctionCall
from ..errors import DomainError
from ...canvas import Canvas, Circle
from ... import pol as polar

if TYPE_CHECKING:
    from .interpreter import Interpreter

Implementation = Callable[["Interpreter", FunctionCall], Value]


@dataclass
class BuiltinFunction:
    """
    A built-in function with its implementation and declared parameters.
    """
    name: str
    parameters: Tuple[str, ...]
    implementation: Implementation
    doc: str = ""


def _bind(interpreter: "Interpreter", function_call: FunctionCall) -> Dict[str, Value]:
    return interpret_arguments_from_function_call(interpreter, function_call, {})


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    Functions are registered by name and can be looked up for execution.
    """

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        """Register a function."""
        self._functions[func.name] = func

    def names(self) -> List[str]:
        """Names of all registered functions, sorted."""
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_math_functions()
        self._register_point_functions()
        self._register_canvas_functions()
        self._register_curve_functions()
        self._register_io_functions()

    # --- Math Functions ---

    def _register_math_functions(self) -> None:
        """Register transcendental functions, `random` and `theta`."""

        def _unary(name: str, primitive: Callable[[float], float]) -> BuiltinFunction:
            def _impl(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
                args = _bind(interpreter, function_call)
                x = number_value_for_parameter(function_call.name, "x", args)
                try:
                    return number_val(primitive(x))
                except (ValueError, OverflowError) as e:
                    raise DomainError(
                        f"Could not interpret '{function_call.name}'. "
                        f"The value could not be computed for x = {x}: {e}.",
                        function_call.span) from e
            return BuiltinFunction(name, ("x",), _impl, primitive.__doc__ or "")

        for name, primitive in [
            ("sin", math.sin),
            ("cos", math.cos),
            ("sinh", math.sinh),
            ("cosh", math.cosh),
            ("exp", math.exp),
            ("log", math.log),
            ("sqrt", math.sqrt),
        ]:
            self.register(_unary(name, primitive))

        def _random(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            low = number_value_for_parameter(function_call.name, "from", args)
            high = number_value_for_parameter(function_call.name, "to", args)
            if high < low:
                raise DomainError(
                    f"Could not interpret '{function_call.name}'. "
                    "Argument 'from' must not be larger than 'to'.",
                    function_call.span)
            return number_val(interpreter.context.rng.uniform(low, high))

        def _theta(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            name = function_call.name
            args = _bind(interpreter, function_call)
            r1 = number_value_for_parameter(name, "r1", args)
            r2 = number_value_for_parameter(name, "r2", args)
            R = number_value_for_parameter(name, "R", args)

            if r1 > R or r2 > R:
                raise DomainError(
                    f"Could not interpret '{name}'. Argument 'r1' and 'r2' must not be "
                    f"larger than 'R'. (r1 = {r1}, r2 = {r2}, R = {R})",
                    function_call.span)
            if r1 + r2 < R:
                raise DomainError(
                    f"Could not interpret '{name}'. The sum of the arguments 'r1' and "
                    "'r2' must be at least 'R'.",
                    function_call.span)

            angle = polar.theta(r1, r2, R)
            # negative results signal that the identity could not be resolved
            if angle < 0.0:
                raise DomainError(
                    f"Could not interpret '{name}'. The value could not be computed "
                    "due to numerical issues.",
                    function_call.span)
            return number_val(angle)

        self.register(BuiltinFunction(
            "random", ("from", "to"), _random,
            "Uniformly distributed number between 'from' and 'to'."))
        self.register(BuiltinFunction(
            "theta", ("r1", "r2", "R"), _theta,
            "Angle between points at radii 'r1' and 'r2' that are 'R' apart."))

    # --- Point Functions ---

    def _register_point_functions(self) -> None:
        """Register functions computing with Pol points."""

        def _distance(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            start = pol_value_for_parameter(function_call.name, "from", args)
            end = pol_value_for_parameter(function_call.name, "to", args)
            return number_val(start.distance_to(end))

        def _rotate(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            point = pol_value_for_parameter(function_call.name, "point", args)
            angle = number_value_for_parameter(function_call.name, "by", args)
            return pol_val(point.rotate_by(angle))

        def _translate(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            point = pol_value_for_parameter(function_call.name, "point", args)
            distance = number_value_for_parameter(function_call.name, "by", args)
            return pol_val(point.translate_horizontally_by(distance))

        self.register(BuiltinFunction(
            "distance", ("from", "to"), _distance,
            "Hyperbolic distance between two points."))
        self.register(BuiltinFunction(
            "rotate", ("point", "by"), _rotate,
            "Point rotated about the origin."))
        self.register(BuiltinFunction(
            "translate", ("point", "by"), _translate,
            "Point translated along the horizontal axis."))

    # --- Canvas Functions ---

    def _register_canvas_functions(self) -> None:
        """Register functions that draw on or configure the canvas."""

        def _clear(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            _bind(interpreter, function_call)
            interpreter.context.canvas.clear()
            return none_val()

        def _circle(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            center = pol_value_for_parameter(function_call.name, "center", args)
            radius = number_value_for_parameter(function_call.name, "radius", args)
            canvas = interpreter.context.canvas
            canvas.add_path(Canvas.path_for_circle(center, radius, canvas.resolution))
            return none_val()

        def _mark(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            center = pol_value_for_parameter(function_call.name, "center", args)
            radius = number_value_for_parameter(function_call.name, "radius", args)
            interpreter.context.canvas.add_mark(Circle(center, radius))
            return none_val()

        def _line(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            start = pol_value_for_parameter(function_call.name, "from", args)
            end = pol_value_for_parameter(function_call.name, "to", args)
            canvas = interpreter.context.canvas
            canvas.add_path(Canvas.path_for_line(start, end, canvas.resolution))
            return none_val()

        def _set_resolution(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            x = number_value_for_parameter(function_call.name, "x", args)
            if not x > 0.0 or not math.isfinite(x):
                raise DomainError(
                    f"Invalid argument in function '{function_call.name}'. "
                    "Cannot set non-positive or infinite resolution.",
                    function_call.span)
            interpreter.context.canvas.resolution = x
            return number_val(x)

        self.register(BuiltinFunction("clear", (), _clear, "Remove everything from the canvas."))
        self.register(BuiltinFunction(
            "circle", ("center", "radius"), _circle, "Draw a circle."))
        self.register(BuiltinFunction(
            "mark", ("center", "radius"), _mark, "Mark a point with a small circle."))
        self.register(BuiltinFunction(
            "line", ("from", "to"), _line, "Draw the line between two points."))
        self.register(BuiltinFunction(
            "set_resolution", ("x",), _set_resolution,
            "Set the number of samples used to discretize curves."))

    # --- Curve Functions ---

    def _register_curve_functions(self) -> None:
        """Register the adaptive curve samplers."""
        self.register(BuiltinFunction(
            "curve_angle", ("from", "to", "angle"), curve_angle,
            "Draw a curve between two points on a ray, turned by 'angle' at each sample."))
        self.register(BuiltinFunction(
            "curve_distance", ("from", "to", "distance"), curve_distance,
            "Draw a curve at a signed offset 'distance' from the line between two points."))

    # --- I/O Functions ---

    def _register_io_functions(self) -> None:
        """Register output functions."""

        def _print(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            message = string_value_for_parameter(function_call.name, "message", args)
            interpreter.context.write(message)
            return none_val()

        def _save(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
            args = _bind(interpreter, function_call)
            file_name = string_value_for_parameter(function_call.name, "file", args)
            try:
                interpreter.context.canvas.save_to_file(file_name)
            except OSError as e:
                raise DomainError(
                    f"Could not interpret '{function_call.name}'. "
                    f"Failed to write '{file_name}': {e}.",
                    function_call.span) from e
            return none_val()

        self.register(BuiltinFunction(
            "print", ("message",), _print, "Write a message to the output."))
        self.register(BuiltinFunction(
            "save", ("file",), _save, "Save the canvas to a DXF file."))


# Global singleton registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry
