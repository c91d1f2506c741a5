"""Add, delete, and change commands for data layers.

A command describes a modification without performing it. Applying it to a
:class:`DataLayer` builds a fresh engine command, executes it, and records
it in the layer's history, so it can be undone and redone::

    from geocmd.edit import add, change, delete

    add(p1, p2, [p3, w1]).apply_to(layer)
    change(p1, p2, {"lat": 47.1, "tags": {"name": "Bridge"}}).apply_to(layer)
    delete(w1).apply_to(layer)

Positional arguments may be primitives, None, or arbitrarily nested
collections of them; see :func:`geocmd.edit.flatten.flatten`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from geocmd.domain.changes import ChangeSpec
from geocmd.domain.primitives import Primitive, is_primitive
from geocmd.edit.changes import ChangeOptions, build_change_spec
from geocmd.edit.flatten import flatten
from geocmd.errors import InvalidArgumentError, PreconditionError
from geocmd.infrastructure.layers import DataLayer
from geocmd.infrastructure.native import (
    AddPrimitivesCommand,
    ChangePrimitivesCommand,
    DeletePrimitivesCommand,
    EngineCommand,
)
from geocmd.util import assert_that, is_something

logger = logging.getLogger(__name__)


def check_layer(layer: Any) -> DataLayer:
    """Validate the target of :meth:`Command.apply_to`."""
    assert_that(is_something(layer), "layer: must not be None")
    assert_that(
        isinstance(layer, DataLayer),
        "layer: expected DataLayer, got {0}",
        layer,
        error_cls=InvalidArgumentError,
    )
    return layer


class Command(ABC):
    """An immutable description of a modification of a set of primitives."""

    __slots__ = ("_targets",)

    def __init__(self, objs: Any) -> None:
        self._targets = flatten(objs)

    @property
    def targets(self) -> frozenset[Primitive]:
        """The distinct primitives this command operates on."""
        return self._targets

    def apply_to(self, layer: DataLayer) -> None:
        """Apply this command to *layer*, recording it in history."""
        check_layer(layer).apply(self)

    def create_engine_command(self, layer: DataLayer) -> EngineCommand:
        """Build a new engine command for *layer* without executing it.

        Every call returns a new, independent object. Use this to compose
        several commands into one sequence before applying them.
        """
        return self._build(check_layer(layer))

    @abstractmethod
    def _build(self, layer: DataLayer) -> EngineCommand: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} targets={len(self._targets)}>"


class AddCommand(Command):
    """Adds primitives to a layer."""

    __slots__ = ()

    def __init__(self, objs: Any) -> None:
        assert_that(is_something(objs), "objs: mandatory parameter missing")
        super().__init__(objs)

    def _build(self, layer: DataLayer) -> EngineCommand:
        return AddPrimitivesCommand(layer, self._targets)


class DeleteCommand(Command):
    """Deletes primitives from a layer.

    Untagged points of deleted paths that nothing else uses are deleted too;
    references from surviving paths and groups are removed.
    """

    __slots__ = ()

    def _build(self, layer: DataLayer) -> EngineCommand:
        return DeletePrimitivesCommand.delete(
            layer,
            self._targets,
            also_delete_nodes_in_way=True,
            silent=True,
        )


class ChangeCommand(Command):
    """Applies one :class:`ChangeSpec` to every target."""

    __slots__ = ("_spec",)

    def __init__(self, objs: Any, spec: ChangeSpec) -> None:
        assert_that(is_something(spec), "spec: mandatory parameter missing")
        assert_that(
            isinstance(spec, ChangeSpec),
            "spec: expected ChangeSpec, got {0}",
            spec,
            error_cls=InvalidArgumentError,
        )
        super().__init__(objs)
        self._spec = spec

    @property
    def spec(self) -> ChangeSpec:
        return self._spec

    def _build(self, layer: DataLayer) -> EngineCommand:
        return ChangePrimitivesCommand(layer, self._targets, self._spec)

    def __repr__(self) -> str:
        fields = ",".join(self._spec.field_names)
        return f"<ChangeCommand targets={len(self._targets)} fields={fields}>"


def add(*objs: Any) -> AddCommand:
    """Create a command adding primitives to a layer.

    Examples:
        add(p1, p2).apply_to(layer)
        layer.apply(add([p1, p2, path]))
    """
    if not objs:
        raise PreconditionError("objs: mandatory parameter missing")
    command = AddCommand(objs)
    logger.debug("Created %r", command)
    return command


def delete(*objs: Any) -> DeleteCommand:
    """Create a command deleting primitives from a layer. No argument is required."""
    command = DeleteCommand(objs)
    logger.debug("Created %r", command)
    return command


def change(*args: Any) -> ChangeCommand:
    """Create a command changing primitives.

    The last argument holds the change options, either a
    :class:`ChangeOptions` or a mapping; all others are the targets::

        change(p1, p2, {"lat": 45.0, "lon": 7.5})
        change(path, {"nodes": [p1, p2, p3]})
        change(p1, path, group, {"tags": {"highway": "residential"}})
    """
    if not args:
        raise InvalidArgumentError("Unexpected number of arguments, got {0} arguments", 0)
    *objs, options = args
    if is_primitive(options):
        raise InvalidArgumentError(
            "Argument {0}: unexpected last argument, expected named options, got {1}",
            len(args) - 1,
            options,
        )
    if not isinstance(options, (ChangeOptions, Mapping)):
        raise InvalidArgumentError(
            "Argument {0}: unexpected type of value, got {1}", len(args) - 1, options
        )
    spec = build_change_spec(options)
    command = ChangeCommand(objs, spec)
    logger.debug("Created %r", command)
    return command
