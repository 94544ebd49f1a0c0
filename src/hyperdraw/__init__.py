"""hyperdraw: procedural drawing in the hyperbolic plane.

Scripts are sequences of calls to built-in functions that compute values
or draw on a canvas. The ``hyperdraw.dsl`` package holds the evaluator;
``hyperdraw.pol`` the polar-point math; ``hyperdraw.canvas`` the drawing
surface and its DXF export.
"""

__version__ = "0.1.0"
