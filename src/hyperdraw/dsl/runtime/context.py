"""
Execution context for the hyperdraw evaluator.

Manages the scope stack, owns the canvas and the output streams, and
collects diagnostics.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO
from contextlib import contextmanager
import logging
import random
import sys

from .values import Value
from ..errors import Diagnostic, DiagnosticCollector, ScopeError
from ..ast import SourceSpan
from ...canvas import Canvas, DEFAULT_RESOLUTION

logger = logging.getLogger(__name__)

# Name of the variable holding the current sample point in curve samplers
HIDDEN_VARIABLE = "_p"


@dataclass
class Scope:
    """A single frame of variable bindings."""
    variables: Dict[str, Value] = field(default_factory=dict)
    name: str = "anonymous"  # For debugging


class ScopeStack:
    """
    A stack of scope frames.

    Frame 0 is the global frame and is never removed. Lookups search from
    the innermost frame outward, so inner bindings shadow outer ones.
    """

    def __init__(self):
        self.frames: List[Scope] = [Scope(name="global")]

    @property
    def depth(self) -> int:
        """Number of frames, including the global frame."""
        return len(self.frames)

    @property
    def current_frame(self) -> int:
        """Index of the innermost frame."""
        return len(self.frames) - 1

    def open_new_scope(self, name: str = "block") -> None:
        self.frames.append(Scope(name=name))
        logger.debug("Opened scope '%s' (depth %d)", name, self.depth)

    def close_scope(self, expected_frame: Optional[int] = None) -> None:
        """
        Discard the innermost frame.

        Raises ScopeError, leaving the stack unchanged, if only the global
        frame remains or if ``expected_frame`` is given and is not the
        innermost frame.
        """
        if len(self.frames) <= 1:
            raise ScopeError(
                "Could not close scope as that would mean closing the last scope.")
        if expected_frame is not None and expected_frame != self.current_frame:
            raise ScopeError(
                f"Could not close scope {expected_frame}: the innermost scope is "
                f"{self.current_frame}.")
        scope = self.frames.pop()
        logger.debug("Closed scope '%s' (depth %d)", scope.name, self.depth)

    def define_variable_with_value(self, name: str, value: Value) -> int:
        """Bind ``name`` in the innermost frame and return that frame's index."""
        self.frames[-1].variables[name] = value
        return self.current_frame

    def set_value_for_variable(self, name: str, value: Value, frame_id: int) -> None:
        """Overwrite the binding of ``name`` in the frame ``frame_id``."""
        if not 0 <= frame_id < len(self.frames):
            raise ScopeError(
                f"Could not set variable '{name}': scope {frame_id} does not exist.")
        self.frames[frame_id].variables[name] = value

    def lookup(self, name: str) -> Optional[Value]:
        """Resolve ``name`` from the innermost frame outward."""
        for scope in reversed(self.frames):
            if name in scope.variables:
                return scope.variables[name]
        return None

    def assign(self, name: str, value: Value) -> int:
        """
        Rebind ``name`` where it is already defined, otherwise define it in
        the innermost frame. Returns the index of the frame written to.
        """
        for index in range(len(self.frames) - 1, -1, -1):
            if name in self.frames[index].variables:
                self.frames[index].variables[name] = value
                return index
        return self.define_variable_with_value(name, value)

    @contextmanager
    def hidden_variable(self, value: Value, name: str = HIDDEN_VARIABLE):
        """
        Open a frame holding a single hidden variable.

        Yields a HiddenVariable handle for updating the binding in place.
        The frame is closed when the block exits, whether it completes or
        raises. If the block raised, that error is the one propagated; a
        failure to close the frame at that point is only logged.

        Usage:
            with scopes.hidden_variable(pol_val(start)) as current:
                for point in samples:
                    current.set(pol_val(point))
                    ...
        """
        self.open_new_scope(name="hidden")
        frame_id = self.define_variable_with_value(name, value)
        try:
            yield HiddenVariable(self, name, frame_id)
        except BaseException:
            try:
                self.close_scope(expected_frame=frame_id)
            except ScopeError as close_error:
                logger.error("Hidden variable '%s' left open after an error: %s",
                             name, close_error.message)
            raise
        self.close_scope(expected_frame=frame_id)


@dataclass
class HiddenVariable:
    """Handle to a hidden variable binding inside an open frame."""
    scopes: ScopeStack
    name: str
    frame_id: int

    def set(self, value: Value) -> None:
        self.scopes.set_value_for_variable(self.name, value, self.frame_id)


@dataclass
class ExecutionContext:
    """
    The full state a script runs against.

    Tracks:
    - Variable scopes
    - The canvas being drawn on
    - Output streams for `print` and for error messages
    - The random number generator used by `random`
    - Diagnostics
    """
    scopes: ScopeStack = field(default_factory=ScopeStack)
    canvas: Canvas = field(default_factory=Canvas)
    output: Optional[TextIO] = None
    error_output: Optional[TextIO] = None
    rng: random.Random = field(default_factory=random.Random)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    def get_variable(self, name: str) -> Optional[Value]:
        """Look up a variable in the scope stack."""
        return self.scopes.lookup(name)

    def set_variable(self, name: str, value: Value) -> None:
        """Assign a variable (rebinding an existing one where present)."""
        self.scopes.assign(name, value)

    def write(self, text: str) -> None:
        """Write text to the output stream without adding a newline."""
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text)
        stream.flush()

    def print_error_message(self, message: str, code: str = "E400",
                            span: Optional[SourceSpan] = None) -> Diagnostic:
        """
        Report an error to the user.

        This is the only channel for user-visible error text: the message
        is recorded as a diagnostic and written to the error stream.
        """
        diag = Diagnostic(code=code, message=message, span=span)
        self.diagnostics.add(diag)
        stream = self.error_output if self.error_output is not None else sys.stderr
        stream.write(diag.format() + "\n")
        return diag


def create_context(
    resolution: float = DEFAULT_RESOLUTION,
    output: Optional[TextIO] = None,
    error_output: Optional[TextIO] = None,
    seed: Optional[int] = None,
) -> ExecutionContext:
    """
    Create a fresh execution context.

    Args:
        resolution: Initial sampling resolution of the canvas
        output: Stream for `print` (defaults to stdout)
        error_output: Stream for error messages (defaults to stderr)
        seed: Seed for the random number generator, for reproducible runs

    Returns:
        An ExecutionContext with an empty global scope and a blank canvas
    """
    return ExecutionContext(
        canvas=Canvas(resolution),
        output=output,
        error_output=error_output,
        rng=random.Random(seed),
    )
