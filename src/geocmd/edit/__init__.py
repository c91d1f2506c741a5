"""Edit layer — commands over primitives and the history facade.

Depends on domain and infrastructure. Must never import from services,
commands, output, or config.
"""

from geocmd.edit.changes import ChangeOptions, build_change_spec
from geocmd.edit.combine import combine_selected_ways, combine_ways
from geocmd.edit.commands import (
    AddCommand,
    ChangeCommand,
    Command,
    DeleteCommand,
    add,
    change,
    delete,
)
from geocmd.edit.flatten import flatten
from geocmd.edit.history import CommandHistory

__all__ = [
    "AddCommand",
    "ChangeCommand",
    "ChangeOptions",
    "Command",
    "CommandHistory",
    "DeleteCommand",
    "add",
    "build_change_spec",
    "change",
    "combine_selected_ways",
    "combine_ways",
    "delete",
    "flatten",
]
