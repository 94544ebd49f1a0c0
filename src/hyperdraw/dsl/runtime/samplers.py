"""
Adaptive curve samplers: ``curve_angle`` and ``curve_distance``.

Both build a path by re-evaluating one argument expression at a sequence
of sample points. The current sample point is exposed to that expression
as the hidden variable ``_p``, bound in a frame that exists only while
the sampler runs.
"""

from typing import TYPE_CHECKING, Iterator, List
import logging
import math

from .binder import (
    interpret_arguments_from_function_call,
    number_value_for_parameter,
    pol_value_for_parameter,
)
from .values import Value, none_val, pol_val
from ..ast import FunctionCall
from ..errors import DomainError
from ...canvas import Path
from ...pol import Pol, CanonicalFrame

if TYPE_CHECKING:
    from .interpreter import Interpreter

logger = logging.getLogger(__name__)

# Extra samples are added within this many coarse steps of the span start
DETAIL_SPAN_STEPS = 5.0
# Each coarse step near the start gets resolution / DETAIL_DIVISOR sub-steps
DETAIL_DIVISOR = 5.0


def adaptive_samples(start: float, end: float, step: float, resolution: float,
                     include_end: bool = True) -> Iterator[float]:
    """
    Generate sample positions across ``[start, end]`` (or ``[start, end)``).

    Positions are spaced ``step`` apart. Within the first
    ``DETAIL_SPAN_STEPS * step`` of the span, ``resolution / DETAIL_DIVISOR``
    sub-samples are interleaved per step, concentrating detail near the
    start. The sequence is strictly increasing and never leaves the span.
    """
    if not step > 0:
        raise ValueError(f"step must be positive, got {step}")

    def within(position: float) -> bool:
        return position <= end if include_end else position < end

    detail_threshold = start + DETAIL_SPAN_STEPS * step
    detail_step = step / (resolution / DETAIL_DIVISOR)

    position = start
    while within(position):
        yield position
        following = position + step
        if following <= position:
            raise ValueError(f"step {step} is too small to advance from {position}")
        if position < detail_threshold:
            extra = position + detail_step
            while extra < following and within(extra):
                yield extra
                extra += detail_step
        position = following


def _step_size(function_call: FunctionCall, span: float, resolution: float) -> float:
    step = span / resolution
    if not step > 0:
        raise DomainError(
            f"Invalid step size <= 0 in function '{function_call.name}'. "
            "Make sure that 'to' and 'from' are not the same point.",
            function_call.span)
    return step


def _sample_positions(function_call: FunctionCall, start: float, end: float,
                      step: float, resolution: float, include_end: bool) -> List[float]:
    try:
        return list(adaptive_samples(start, end, step, resolution, include_end))
    except ValueError as e:
        raise DomainError(f"Could not sample '{function_call.name}': {e}.",
                          function_call.span) from e


def curve_angle(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
    """
    Add a path running outward from ``from`` to ``to`` (two points on the
    same ray), where each sample at radius r is turned by the value of the
    ``angle`` expression evaluated with ``_p = Pol(r, from.phi)``.
    """
    name = function_call.name
    ctx = interpreter.context

    bindings = {}
    interpret_arguments_from_function_call(interpreter, function_call, bindings,
                                           ("from", "to"))
    start = pol_value_for_parameter(name, "from", bindings)
    end = pol_value_for_parameter(name, "to", bindings)

    if start.phi != end.phi:
        raise DomainError(
            f"Could not interpret '{name}'. The angular coordinates of the two "
            f"endpoints did not match: '{start.phi}' vs. '{end.phi}'.",
            function_call.span)

    if start.r > end.r:
        start, end = end, start

    resolution = ctx.canvas.resolution
    step = _step_size(function_call, end.r - start.r, resolution)
    radii = _sample_positions(function_call, start.r, end.r, step, resolution,
                              include_end=True)
    logger.debug("'%s' sampling %d radii in [%g, %g]", name, len(radii), start.r, end.r)

    path = Path(is_closed=False)
    with ctx.scopes.hidden_variable(pol_val(Pol(start.r, start.phi))) as current:
        for r in radii:
            current.set(pol_val(Pol(r, start.phi)))
            angle_bindings = interpret_arguments_from_function_call(
                interpreter, function_call, {}, ("angle",))
            angle = number_value_for_parameter(name, "angle", angle_bindings)
            path.append(Pol(r, start.phi + angle))

    ctx.canvas.add_path(path)
    return none_val()


def _offset_point(distance: float) -> Pol:
    """Canonical-frame point at |distance| above (d >= 0) or below the axis."""
    if distance < 0:
        return Pol(abs(distance), 2.0 * math.pi - math.pi / 2.0)
    return Pol(abs(distance), math.pi / 2.0)


def curve_distance(interpreter: "Interpreter", function_call: FunctionCall) -> Value:
    """
    Add a path that follows the geodesic from ``from`` to ``to`` at the
    signed perpendicular offset given by the ``distance`` expression,
    evaluated with ``_p`` bound to the corresponding point on the line.
    Positive distances lie to the left of the direction of travel.
    """
    name = function_call.name
    ctx = interpreter.context

    bindings = {}
    interpret_arguments_from_function_call(interpreter, function_call, bindings,
                                           ("from", "to"))
    start = pol_value_for_parameter(name, "from", bindings)
    end = pol_value_for_parameter(name, "to", bindings)

    resolution = ctx.canvas.resolution
    step = _step_size(function_call, start.distance_to(end), resolution)
    frame = CanonicalFrame(start, end)
    positions = _sample_positions(function_call, 0.0, frame.length, step, resolution,
                                  include_end=False)
    logger.debug("'%s' sampling %d positions along length %g", name,
                 len(positions), frame.length)

    path = Path(is_closed=False)
    with ctx.scopes.hidden_variable(pol_val(start)) as current:
        for position in positions:
            current.set(pol_val(frame.point_on_line(position)))
            distance_bindings = interpret_arguments_from_function_call(
                interpreter, function_call, {}, ("distance",))
            distance = number_value_for_parameter(name, "distance", distance_bindings)

            offset = _offset_point(distance).translate_horizontally_by(position)
            path.append(frame.to_original(offset))

    ctx.canvas.add_path(path)
    return none_val()
