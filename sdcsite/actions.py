"""
Directives against the OS and how they are carried out.

Planners never run commands themselves. They return Directive objects
tagged with a Disposition:

- APPLY       run the command
- DRY_RUN     print the command only (test mode)
- SUPPRESSED  computed but deliberately not applied (group creation and
              per-user membership changes); reported with a prefix
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Sequence, Tuple

from rich.console import Console

from sdcsite.errors import CommandError


class Disposition(Enum):
    APPLY = "apply"
    DRY_RUN = "dry-run"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class Directive:
    command: Tuple[str, ...]
    disposition: Disposition

    def __str__(self) -> str:
        return " ".join(self.command)


def report(console: Console, text: str) -> None:
    """
    Print text verbatim, with rich markup, emoji codes and wrapping disabled.
    """
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def live_or_dry(dry_run: bool) -> Disposition:
    return Disposition.DRY_RUN if dry_run else Disposition.APPLY


Runner = Callable[[Sequence[str]], int]


def run_command(command: Sequence[str]) -> int:
    """
    Run an external command and return its exit code.
    """
    proc = subprocess.run(list(command), check=False)
    return proc.returncode


def execute(
    directives: Iterable[Directive],
    console: Console,
    runner: Runner = run_command,
) -> List[Directive]:
    """
    Carry out directives in order. Returns the ones that were applied.

    A failing command aborts the run with CommandError.
    """
    applied: List[Directive] = []
    for d in directives:
        if d.disposition is Disposition.SUPPRESSED:
            report(console, f"suppressed: {d}")
            continue

        report(console, str(d))
        if d.disposition is Disposition.DRY_RUN:
            continue

        rc = runner(d.command)
        if rc != 0:
            raise CommandError(d.command, rc)
        applied.append(d)

    return applied
