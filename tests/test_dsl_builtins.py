"""
Tests for the built-in functions and the dispatch contract.
"""

import io
import math

import pytest

from hyperdraw.dsl import BinaryOp, Identifier, Interpreter, Literal, call, create_context, pol
from hyperdraw.dsl.runtime import (
    BuiltinRegistry, ValueKind, get_builtin_registry, number_val, string_val,
)
from hyperdraw.pol import Pol


@pytest.fixture
def interp():
    ctx = create_context(resolution=10, output=io.StringIO(),
                         error_output=io.StringIO(), seed=7)
    return Interpreter(ctx)


def errors(interp):
    return interp.context.diagnostics.messages


class TestRegistry:
    """Test the builtin registry."""

    def test_all_functions_registered(self):
        """Test the full set of builtin names."""
        registry = get_builtin_registry()
        assert registry.names() == sorted([
            "circle", "clear", "cos", "cosh", "curve_angle", "curve_distance",
            "distance", "exp", "line", "log", "mark", "print", "random", "rotate",
            "save", "set_resolution", "sin", "sinh", "sqrt", "theta", "translate",
        ])

    def test_declared_parameters(self):
        """Test declared parameter names."""
        registry = get_builtin_registry()
        assert registry.get_function("clear").parameters == ()
        assert registry.get_function("theta").parameters == ("r1", "r2", "R")
        assert registry.get_function("curve_distance").parameters == ("from", "to", "distance")

    def test_lookup(self):
        """Test lookup of known and unknown names."""
        registry = BuiltinRegistry()
        assert "sin" in registry
        assert registry.get_function("nope") is None

    def test_singleton(self):
        """Test the shared registry is reused."""
        assert get_builtin_registry() is get_builtin_registry()


class TestDispatch:
    """Test the call_function contract."""

    def test_unknown_function(self, interp):
        """Test unknown functions are reported."""
        result = interp.call_function(call("tan", x=1))
        assert not result.success
        assert result.value is None
        assert errors(interp) == ["Unknown function 'tan'."]

    def test_extraneous_argument(self, interp):
        """Test undeclared arguments are rejected before drawing."""
        result = interp.call_function(call("circle", center=pol(0.0), radius=1, color=3))
        assert not result.success
        assert "Extraneous argument 'color'" in errors(interp)[0]
        assert interp.context.canvas.paths == []

    def test_extraneous_argument_not_evaluated(self, interp):
        """Test rejected arguments are never evaluated."""
        interp.call_function(call("sin", x=1, y=call("print", message="side effect")))
        assert interp.context.output.getvalue() == ""

    def test_missing_argument(self, interp):
        """Test missing arguments are reported."""
        result = interp.call_function(call("circle", center=pol(0.0)))
        assert not result.success
        assert errors(interp) == ["Missing argument 'radius' in call to function 'circle'."]

    def test_failure_reports_once(self, interp):
        """Test a nested failure is reported only by the failing call."""
        result = interp.call_function(call("sin", x=call("sqrt", x=-1)))
        assert not result.success
        assert interp.context.diagnostics.error_count == 1
        assert "'sqrt'" in errors(interp)[0]

    def test_errors_written_to_error_stream(self, interp):
        """Test diagnostics reach the error stream."""
        interp.call_function(call("random", {"from": 3, "to": 1}))
        assert "'from' must not be larger than 'to'" in interp.context.error_output.getvalue()

    def test_nested_overflow_reports_once(self, interp):
        """Test an overflow inside a nested call fails the whole chain once."""
        inner = call("distance", {"from": pol(800.0, 0.0), "to": pol(800.0, 1.0)})
        result = interp.call_function(call("sin", x=inner))
        assert not result.success
        assert interp.context.diagnostics.error_count == 1
        assert "'distance'" in errors(interp)[0]


class TestMathFunctions:
    """Test numeric builtins."""

    @pytest.mark.parametrize("name, primitive", [
        ("sin", math.sin), ("cos", math.cos), ("sinh", math.sinh),
        ("cosh", math.cosh), ("exp", math.exp), ("log", math.log), ("sqrt", math.sqrt),
    ])
    def test_unary(self, interp, name, primitive):
        """Test unary functions match the math module."""
        result = interp.call_function(call(name, x=0.5))
        assert result.success
        assert result.value == number_val(primitive(0.5))

    def test_type_mismatch(self, interp):
        """Test a string argument is rejected."""
        result = interp.call_function(call("sin", x="a"))
        assert not result.success
        assert "Expected a value of type 'number' but got 'string'" in errors(interp)[0]

    def test_sqrt_negative_fails(self, interp):
        """Test sqrt of a negative number fails."""
        assert not interp.call_function(call("sqrt", x=-1)).success

    def test_log_zero_fails(self, interp):
        """Test log of zero fails."""
        assert not interp.call_function(call("log", x=0)).success

    def test_exp_overflow_fails(self, interp):
        """Test exp overflow fails."""
        assert not interp.call_function(call("exp", x=1000)).success

    def test_random_degenerate_interval(self, interp):
        """Test an empty interval returns its bound."""
        result = interp.call_function(call("random", {"from": 2, "to": 2}))
        assert result.success
        assert result.value.data == 2.0

    def test_random_in_range(self, interp):
        """Test random values stay in the interval."""
        for _ in range(20):
            value = interp.call_function(call("random", {"from": -1, "to": 4})).value.data
            assert -1.0 <= value <= 4.0

    def test_random_reversed_bounds(self, interp):
        """Test reversed bounds fail."""
        result = interp.call_function(call("random", {"from": 3, "to": 1}))
        assert not result.success

    def test_random_reproducible_with_seed(self):
        """Test seeded contexts draw the same values."""
        def draw():
            i = Interpreter(create_context(seed=11))
            return i.call_function(call("random", {"from": 0, "to": 1})).value

        assert draw() == draw()

    def test_theta_feasible(self, interp):
        """Test theta for feasible inputs."""
        result = interp.call_function(call("theta", r1=3, r2=3, R=5))
        assert result.success
        assert result.value.data >= 0.0

    def test_theta_sum_too_small(self, interp):
        """Test theta rejects r1 + r2 < R."""
        result = interp.call_function(call("theta", r1=1, r2=1, R=5))
        assert not result.success
        assert "must be at least 'R'" in errors(interp)[0]

    def test_theta_radius_too_large(self, interp):
        """Test theta rejects a radius larger than R."""
        result = interp.call_function(call("theta", r1=6, r2=1, R=5))
        assert not result.success
        assert "must not be larger than 'R'" in errors(interp)[0]

    def test_theta_numerical_failure(self, interp):
        """Test theta reports degenerate radii."""
        result = interp.call_function(call("theta", r1=0, r2=1, R=1))
        assert not result.success
        assert "numerical issues" in errors(interp)[0]


class TestPointFunctions:
    """Test builtins computing with points."""

    def test_distance_from_origin(self, interp):
        """Test distance from the origin."""
        result = interp.call_function(call("distance", {"from": pol(0, 0), "to": pol(5, 2.7)}))
        assert result.success
        assert result.value == number_val(5)

    def test_rotate(self, interp):
        """Test rotate returns a Pol."""
        result = interp.call_function(call("rotate", point=pol(1.0, 0.5), by=0.25))
        assert result.success
        assert result.value.kind == ValueKind.STRUCT
        assert result.value.type_tag == "Pol"
        assert result.value.get_property("r").data == 1.0
        assert result.value.get_property("phi").data == pytest.approx(0.75)

    def test_translate(self, interp):
        """Test translate moves the origin along the axis."""
        result = interp.call_function(call("translate", point=pol(0.0), by=1.5))
        assert result.success
        assert result.value.get_property("r").data == pytest.approx(1.5)

    def test_rotate_requires_pol(self, interp):
        """Test rotate rejects a number."""
        result = interp.call_function(call("rotate", point=1, by=0.25))
        assert not result.success

    def test_translate_overflow_fails(self, interp):
        """Test a translation too large to compute is reported."""
        result = interp.call_function(call("translate", point=pol(1.0, 0.5), by=1000))
        assert not result.success
        assert result.value is None
        assert interp.context.diagnostics.error_count == 1
        assert "Could not interpret 'translate'" in errors(interp)[0]

    def test_distance_overflow_fails(self, interp):
        """Test a distance too large to compute is reported."""
        result = interp.call_function(call("distance", {"from": pol(800.0, 0.0),
                                                        "to": pol(800.0, 1.0)}))
        assert not result.success
        assert "Could not interpret 'distance'" in errors(interp)[0]
        assert "E402" in interp.context.error_output.getvalue()


class TestCanvasFunctions:
    """Test builtins that draw on the canvas."""

    def test_clear(self, interp):
        """Test clear empties the canvas."""
        canvas = interp.context.canvas
        interp.call_function(call("line", {"from": pol(0), "to": pol(1)}))
        assert canvas.paths
        result = interp.call_function(call("clear"))
        assert result.success
        assert result.value.is_none
        assert canvas.paths == []

    def test_clear_rejects_arguments(self, interp):
        """Test clear takes no arguments."""
        interp.call_function(call("line", {"from": pol(0), "to": pol(1)}))
        result = interp.call_function(call("clear", x=1))
        assert not result.success
        assert errors(interp) == [
            "Extraneous argument in call to function 'clear'. "
            "This function does not take any arguments."]
        assert len(interp.context.canvas.paths) == 1

    def test_circle(self, interp):
        """Test circle adds a closed path."""
        result = interp.call_function(call("circle", center=pol(1.0, 0.3), radius=0.5))
        assert result.success
        path = interp.context.canvas.paths[0]
        assert path.is_closed
        assert len(path) == 10

    def test_circle_overflow_fails(self, interp):
        """Test a circle too large to compute is reported without drawing."""
        result = interp.call_function(call("circle", center=pol(1.0, 0.0), radius=1000))
        assert not result.success
        assert "Could not interpret 'circle'" in errors(interp)[0]
        assert interp.context.canvas.paths == []

    def test_mark(self, interp):
        """Test mark records a circle."""
        assert interp.call_function(call("mark", center=pol(1.0, 0.3), radius=0.05)).success
        mark = interp.context.canvas.marks[0]
        assert mark.center == Pol(1.0, 0.3)
        assert mark.radius == 0.05

    def test_line(self, interp):
        """Test line adds resolution segments."""
        assert interp.call_function(call("line", {"from": pol(0), "to": pol(2, 1)})).success
        assert len(interp.context.canvas.paths[0]) == 11

    @pytest.mark.parametrize("x", [0, -1, math.inf])
    def test_set_resolution_unusable(self, interp, x):
        """Test resolutions that are not positive and finite are rejected."""
        result = interp.call_function(call("set_resolution", x=x))
        assert not result.success
        assert interp.context.canvas.resolution == 10
        assert "non-positive or infinite resolution" in errors(interp)[0]

    def test_overflowing_resolution_keeps_canvas_usable(self, interp):
        """Test an infinite product is rejected and later drawing still works."""
        huge = BinaryOp(Literal(1e308), "*", Literal(10))
        assert not interp.call_function(call("set_resolution", x=huge)).success
        assert interp.call_function(call("line", {"from": pol(0), "to": pol(1)})).success
        assert len(interp.context.canvas.paths[0]) == 11

    def test_set_resolution_affects_density(self, interp):
        """Test the resolution drives line density."""
        result = interp.call_function(call("set_resolution", x=2))
        assert result.success
        assert result.value == number_val(2)
        assert interp.context.canvas.resolution == 2
        interp.call_function(call("line", {"from": pol(0), "to": pol(2, 1)}))
        assert len(interp.context.canvas.paths[0]) == 3


class TestIOFunctions:
    """Test print and save."""

    def test_print(self, interp):
        """Test print writes without a newline."""
        assert interp.call_function(call("print", message="hello")).success
        assert interp.call_function(call("print", message=" world")).success
        assert interp.context.output.getvalue() == "hello world"

    def test_print_requires_string(self, interp):
        """Test print rejects numbers."""
        assert not interp.call_function(call("print", message=1)).success
        assert interp.context.output.getvalue() == ""

    def test_save(self, interp, tmp_path):
        """Test save writes the drawing."""
        interp.call_function(call("line", {"from": pol(0), "to": pol(2, 1)}))
        target = tmp_path / "out.dxf"
        result = interp.call_function(call("save", file=str(target)))
        assert result.success
        assert target.exists()

    def test_save_failure_is_reported(self, interp, tmp_path):
        """Test write failures are reported."""
        target = tmp_path / "missing" / "out.dxf"
        result = interp.call_function(call("save", file=str(target)))
        assert not result.success
        assert "Failed to write" in errors(interp)[0]

    def test_save_uses_variable(self, interp, tmp_path):
        """Test the file name may come from a variable."""
        interp.context.set_variable("name", string_val(str(tmp_path / "named")))
        assert interp.call_function(call("save", file=Identifier("name"))).success
        assert (tmp_path / "named.dxf").exists()
