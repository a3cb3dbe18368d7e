"""
Error types.

Everything derived from RosterError is fatal: the run aborts and the
operator fixes the CSV file before trying again.
"""

from __future__ import annotations

from typing import Sequence


class RosterError(ValueError):
    """
    Base class for problems found in the input roster.
    """


class StructuralError(RosterError):
    """
    A record has the wrong number of fields.
    """

    def __init__(self, kind: str, expected: int, actual: int, row: Sequence[str]) -> None:
        self.kind = kind
        self.expected = expected
        self.actual = actual
        self.row = list(row)
        super().__init__(
            f"{kind} record has an invalid number of fields "
            f"(expected {expected}, but got {actual}) {self.row!r}"
        )


class ValidationError(RosterError):
    """
    A field failed its syntax check.
    """

    def __init__(self, field: str, value: str, row: Sequence[str]) -> None:
        self.field = field
        self.value = value
        self.row = list(row)
        super().__init__(f"invalid {field} {value!r} in record {self.row!r}")


class InputFileError(RosterError):
    """
    The roster file can't be decoded or isn't valid CSV.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class IntegrityError(RosterError):
    """
    Duplicate usernames, unknown usernames, clashing group names.
    """


class UnrecognizedRecordError(RosterError):
    def __init__(self, rows: Sequence[Sequence[str]]) -> None:
        self.rows = [list(r) for r in rows]
        lines = "\n".join(repr(r) for r in self.rows)
        super().__init__(f"couldn't understand the following records:\n{lines}")


class CommandError(RuntimeError):
    """
    An external OS command (groupdel, ...) exited with a non-zero status.
    """

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(f"command {' '.join(self.command)!r} failed with exit code {returncode}")
