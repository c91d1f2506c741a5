"""CommandHistory — undo, redo, and clear against an optional history sink.

The facade holds no state of its own. Without a sink (history not set up
yet) every operation validates its arguments and then does nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from geocmd.errors import InvalidArgumentError, ValidationError
from geocmd.infrastructure.layers import Layer
from geocmd.util import assert_that, is_number

if TYPE_CHECKING:
    from geocmd.edit.protocols import HistorySink

logger = logging.getLogger(__name__)


def _check_depth(depth: Any) -> None:
    if depth is None:
        return
    assert_that(
        is_number(depth), "depth: expected a number, got {0}", depth, error_cls=ValidationError
    )
    assert_that(depth > 0, "depth: expected number > 0, got {0}", depth, error_cls=ValidationError)
    # inf % 1 is nan, so infinite depths fail here too.
    assert_that(
        depth % 1 == 0, "depth: expected a whole number, got {0}", depth, error_cls=ValidationError
    )


class CommandHistory:
    """Undo/redo access to the history of applied commands.

    Parameters:
        sink: The history storage, usually the workspace's
            :class:`~geocmd.infrastructure.undo.UndoRedoHandler`. None is
            allowed and turns every operation into a no-op.
    """

    def __init__(self, sink: HistorySink | None = None) -> None:
        self._sink = sink

    @property
    def has_sink(self) -> bool:
        return self._sink is not None

    def undo(self, depth: int | None = None) -> None:
        """Undo the last *depth* commands (default 1)."""
        _check_depth(depth)
        if self._sink is None:
            logger.debug("undo ignored, no history available")
            return
        if depth is None:
            self._sink.undo()
        else:
            self._sink.undo(depth)

    def redo(self, depth: int | None = None) -> None:
        """Redo the last *depth* undone commands (default 1)."""
        _check_depth(depth)
        if self._sink is None:
            logger.debug("redo ignored, no history available")
            return
        if depth is None:
            self._sink.redo()
        else:
            self._sink.redo(depth)

    def clear(self, *args: Any) -> None:
        """Remove history entries.

        ``clear()`` removes all entries, ``clear(layer)`` only those applied
        to *layer*.
        """
        match args:
            case ():
                if self._sink is not None:
                    self._sink.clean()
            case (layer,):
                assert_that(
                    isinstance(layer, Layer),
                    "Expected a Layer, got {0}",
                    layer,
                    error_cls=InvalidArgumentError,
                )
                if self._sink is not None:
                    self._sink.clean(layer)
            case _:
                raise InvalidArgumentError("Unexpected number of arguments, got {0}", len(args))
