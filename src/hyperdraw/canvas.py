"""
Drawing surface for hyperdraw.

The canvas collects paths and marks in the hyperbolic plane and exports
them to DXF using the ezdxf library. Export uses the native
representation of the plane: a point (r, phi) is drawn at the Euclidean
position (r cos phi, r sin phi).
"""

from dataclasses import dataclass, field
from pathlib import Path as FilePath
from typing import Iterator, List
import logging
import math

import ezdxf

from .pol import Pol, CanonicalFrame, pi2

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = 100.0


@dataclass
class Path:
    """An ordered sequence of points, open or closed."""
    points: List[Pol] = field(default_factory=list)
    is_closed: bool = False

    def append(self, point: Pol) -> None:
        self.points.append(point)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Pol]:
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]


@dataclass
class Circle:
    """A mark: a small circle drawn around ``center``."""
    center: Pol
    radius: float


def native_coordinates(point: Pol):
    """Euclidean position of a point in the native representation."""
    return (point.r * math.cos(point.phi), point.r * math.sin(point.phi))


class Canvas:
    """
    Holds the drawing state of a script: sampling resolution, paths and
    marks.
    """

    def __init__(self, resolution: float = DEFAULT_RESOLUTION):
        if not resolution > 0 or not math.isfinite(resolution):
            raise ValueError(f"canvas resolution must be positive and finite, got {resolution}")
        self.resolution = float(resolution)
        self.paths: List[Path] = []
        self.marks: List[Circle] = []

    def __repr__(self) -> str:
        return (f"Canvas(resolution={self.resolution}, paths={len(self.paths)}, "
                f"marks={len(self.marks)})")

    def clear(self) -> None:
        """Remove all paths and marks."""
        self.paths.clear()
        self.marks.clear()

    def add_path(self, path: Path) -> None:
        self.paths.append(path)

    def add_mark(self, mark: Circle) -> None:
        self.marks.append(mark)

    def save_to_file(self, name: str) -> str:
        """
        Write the canvas to a DXF file.

        The ``.dxf`` suffix is appended when ``name`` has none. Returns
        the path actually written. Raises ``OSError`` if the file cannot
        be written.
        """
        path = FilePath(name)
        if not path.suffix:
            path = path.with_suffix('.dxf')

        doc = ezdxf.new(dxfversion='R2010', setup=False)
        doc.header['$INSUNITS'] = 0  # unitless
        doc.layers.add('PATHS', color=7)  # white
        doc.layers.add('MARKS', color=1)  # red
        msp = doc.modelspace()

        for drawn in self.paths:
            if len(drawn) < 2:
                continue
            msp.add_lwpolyline([native_coordinates(p) for p in drawn],
                               close=drawn.is_closed,
                               dxfattribs={'layer': 'PATHS'})
        for mark in self.marks:
            msp.add_circle(native_coordinates(mark.center), mark.radius,
                           dxfattribs={'layer': 'MARKS'})

        doc.saveas(str(path))
        logger.info("Saved %d path(s) and %d mark(s) to %s",
                    len(self.paths), len(self.marks), path)
        return str(path)

    # --- Uniform discretization helpers ---

    @staticmethod
    def segment_count(resolution: float, minimum: int = 1) -> int:
        return max(minimum, int(math.ceil(resolution)))

    @staticmethod
    def path_for_circle(center: Pol, radius: float, resolution: float) -> Path:
        """
        Closed path approximating the hyperbolic circle of ``radius``
        around ``center``.

        The circle is sampled around the origin and then moved into place
        by a horizontal translation followed by a rotation.
        """
        count = Canvas.segment_count(resolution, minimum=3)
        path = Path(is_closed=True)
        for i in range(count):
            point = Pol(abs(radius), pi2 * i / count)
            path.append(point.translate_horizontally_by(center.r).rotate_by(center.phi))
        return path

    @staticmethod
    def path_for_line(start: Pol, end: Pol, resolution: float) -> Path:
        """Open path along the geodesic from ``start`` to ``end``."""
        count = Canvas.segment_count(resolution)
        frame = CanonicalFrame(start, end)
        path = Path(is_closed=False)
        for i in range(count + 1):
            path.append(frame.point_on_line(frame.length * i / count))
        return path
