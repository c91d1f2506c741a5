"""UndoRedoHandler — the history of executed engine commands.

Implements the history-sink contract used by
:class:`geocmd.edit.history.CommandHistory`: ``undo([num])``,
``redo([num])``, ``clean()`` and ``clean(layer)``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from geocmd.infrastructure.layers import Layer
    from geocmd.infrastructure.native import EngineCommand

logger = logging.getLogger(__name__)

type HistoryListener = Callable[[str, dict[str, Any]], None]


class UndoRedoHandler:
    """Undo and redo stacks of engine commands.

    Parameters:
        max_depth: Maximum number of undoable commands kept. The oldest
            entries are dropped first. ``0`` means unlimited.
    """

    def __init__(self, *, max_depth: int = 100) -> None:
        self._max_depth = max_depth
        self._commands: list[EngineCommand] = []
        self._redo_commands: list[EngineCommand] = []
        self._listeners: list[HistoryListener] = []

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def commands(self) -> tuple[EngineCommand, ...]:
        """Undoable commands, oldest first."""
        return tuple(self._commands)

    @property
    def redo_commands(self) -> tuple[EngineCommand, ...]:
        """Redoable commands, next to redo last."""
        return tuple(self._redo_commands)

    @property
    def can_undo(self) -> bool:
        return bool(self._commands)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_commands)

    @property
    def last_command(self) -> EngineCommand | None:
        return self._commands[-1] if self._commands else None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: HistoryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: HistoryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _fire(self, event: str, **payload: Any) -> None:
        for listener in list(self._listeners):
            listener(event, payload)

    # ------------------------------------------------------------------
    # History operations
    # ------------------------------------------------------------------

    def add(self, command: EngineCommand) -> None:
        """Execute *command* and push it onto the undo stack. Clears redo."""
        command.execute()
        self._commands.append(command)
        self._redo_commands.clear()
        if self._max_depth > 0 and len(self._commands) > self._max_depth:
            dropped = len(self._commands) - self._max_depth
            del self._commands[:dropped]
            logger.debug("History limit %d reached, dropped %d entries", self._max_depth, dropped)
        logger.debug("Executed %r", command)
        self._fire(
            "apply",
            layer_name=command.layer.name,
            description=command.description,
            primitive_count=len(command.participating),
        )

    def undo(self, num: int = 1) -> None:
        """Undo the last *num* commands (fewer if the stack is shorter)."""
        count = 0
        for _ in range(int(min(num, len(self._commands)))):
            command = self._commands.pop()
            command.undo()
            self._redo_commands.append(command)
            count += 1
        if count:
            logger.debug("Undid %d commands", count)
            self._fire("undo", count=count)

    def redo(self, num: int = 1) -> None:
        """Redo the last *num* undone commands (fewer if the stack is shorter)."""
        count = 0
        for _ in range(int(min(num, len(self._redo_commands)))):
            command = self._redo_commands.pop()
            command.execute()
            self._commands.append(command)
            count += 1
        if count:
            logger.debug("Redid %d commands", count)
            self._fire("redo", count=count)

    def clean(self, layer: Layer | None = None) -> None:
        """Drop all history, or only the commands applied to *layer*."""
        if layer is None:
            self._commands.clear()
            self._redo_commands.clear()
        else:
            self._commands = [c for c in self._commands if c.layer is not layer]
            self._redo_commands = [c for c in self._redo_commands if c.layer is not layer]
        logger.debug("Cleaned history (layer=%s)", layer.name if layer else None)
        self._fire("clean", layer_name=layer.name if layer else None)
