"""
Polar points in the hyperbolic plane.

A ``Pol`` is a point given by its native polar coordinates: ``r`` is the
hyperbolic distance from the origin and ``phi`` the angle in radians.
All operations are computed through the hyperboloid model, where the
point (r, phi) sits at (cosh r, sinh r cos phi, sinh r sin phi).

Points are immutable; every operation returns a new point.
"""

from dataclasses import dataclass
import math

pi2 = 2.0 * math.pi

# tolerance used when deciding whether an identity is still resolvable
epsilon = 1e-12


def normalize_angle(phi: float) -> float:
    """Map an angle into the interval [0, 2*pi)."""
    result = phi % pi2
    if result >= pi2:
        return 0.0
    return result


def angular_distance(phi1: float, phi2: float) -> float:
    """Smallest absolute difference between two angles, in [0, pi]."""
    delta = abs(normalize_angle(phi1) - normalize_angle(phi2))
    return min(delta, pi2 - delta)


@dataclass(frozen=True)
class Pol:
    """A point in native polar coordinates."""
    r: float
    phi: float = 0.0

    def __repr__(self) -> str:
        return f"Pol(r={self.r!r}, phi={self.phi!r})"

    def _hyperboloid(self):
        s = math.sinh(self.r)
        return math.cosh(self.r), s * math.cos(self.phi), s * math.sin(self.phi)

    @staticmethod
    def _from_hyperboloid(x: float, y: float) -> "Pol":
        # sinh(r) == hypot(x, y); asinh is stable near the origin
        r = math.asinh(math.hypot(x, y))
        if r == 0.0:
            return Pol(0.0, 0.0)
        return Pol(r, normalize_angle(math.atan2(y, x)))

    def rotate_by(self, angle: float) -> "Pol":
        """Return this point rotated about the origin by ``angle``."""
        return Pol(self.r, normalize_angle(self.phi + angle))

    def translate_horizontally_by(self, distance: float) -> "Pol":
        """
        Return this point moved along the ray at angle 0.

        This is the hyperbolic translation whose axis is the horizontal
        geodesic through the origin; it maps the origin to
        ``Pol(|distance|, 0 or pi)`` and keeps every point's distance to
        the horizontal axis unchanged.
        """
        if distance == 0.0:
            return self
        t, x, y = self._hyperboloid()
        ch = math.cosh(distance)
        sh = math.sinh(distance)
        return Pol._from_hyperboloid(sh * t + ch * x, y)

    def distance_to(self, other: "Pol") -> float:
        """Hyperbolic distance between this point and ``other``."""
        if self.r == 0.0:
            return abs(other.r)
        if other.r == 0.0:
            return abs(self.r)
        delta_phi = angular_distance(self.phi, other.phi)
        if delta_phi == 0.0:
            return abs(self.r - other.r)
        cosh_distance = (math.cosh(self.r) * math.cosh(other.r)
                         - math.sinh(self.r) * math.sinh(other.r) * math.cos(delta_phi))
        return math.acosh(max(1.0, cosh_distance))


def distance(p1: Pol, p2: Pol) -> float:
    """Hyperbolic distance between two points."""
    return p1.distance_to(p2)


def theta(r1: float, r2: float, R: float) -> float:
    """
    Angle between two points at radii ``r1`` and ``r2`` that are ``R`` apart.

    Solves the hyperbolic law of cosines for the angle at the origin,
    using the half-angle form

        sin^2(theta/2) = sinh((R + d)/2) sinh((R - d)/2) / (sinh r1 sinh r2)

    with ``d = r1 - r2``, which avoids the cancellation of the direct
    form for larger radii.

    Returns -1.0 when the value cannot be computed (degenerate radii,
    overflow, or an identity that falls outside the valid range).
    """
    delta = r1 - r2
    try:
        denominator = math.sinh(r1) * math.sinh(r2)
        numerator = math.sinh((R + delta) / 2.0) * math.sinh((R - delta) / 2.0)
    except OverflowError:
        return -1.0
    if not denominator > 0.0 or math.isinf(denominator) or math.isinf(numerator):
        return -1.0
    half_sine_squared = numerator / denominator
    if half_sine_squared < -epsilon or half_sine_squared > 1.0 + epsilon:
        return -1.0
    half_sine_squared = min(1.0, max(0.0, half_sine_squared))
    return 2.0 * math.asin(math.sqrt(half_sine_squared))


class CanonicalFrame:
    """
    Coordinate frame in which the segment ``origin -> target`` lies on the
    positive horizontal ray starting at the origin.

    The change of frame is three steps: rotate by ``-origin.phi``,
    translate horizontally by ``-origin.r``, then rotate by the negated
    angle of the transformed target.
    """

    def __init__(self, origin: Pol, target: Pol):
        self.rotation = -origin.phi
        self.translation = -origin.r
        moved_target = target.rotate_by(self.rotation).translate_horizontally_by(self.translation)
        self.second_rotation = -moved_target.phi
        self.length = moved_target.r

    def to_canonical(self, point: Pol) -> Pol:
        """Map a point of the original frame into the canonical frame."""
        return (point.rotate_by(self.rotation)
                .translate_horizontally_by(self.translation)
                .rotate_by(self.second_rotation))

    def to_original(self, point: Pol) -> Pol:
        """Map a point of the canonical frame back into the original frame."""
        return (point.rotate_by(-self.second_rotation)
                .translate_horizontally_by(-self.translation)
                .rotate_by(-self.rotation))

    def point_on_line(self, position: float) -> Pol:
        """The point at ``position`` along the segment, in the original frame."""
        return self.to_original(Pol(position, 0.0))
