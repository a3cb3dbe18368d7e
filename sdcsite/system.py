"""
Read-only views of the OS user and group databases.

Group reconciliation, membership planning and directory ownership only
ever read from a snapshot, so tests can hand in a StaticSnapshot instead
of the machine's real passwd/group files.
"""

from __future__ import annotations

import grp
import pwd
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Protocol

from sdcsite.model import is_sdc_group


class Snapshot(Protocol):
    def user_names(self) -> FrozenSet[str]:
        ...

    def group_members(self) -> Mapping[str, List[str]]:
        ...


def sdc_group_names(snapshot: Snapshot) -> set[str]:
    return {name for name in snapshot.group_members() if is_sdc_group(name)}


def groups_by_member(snapshot: Snapshot, user_names: Iterable[str]) -> Dict[str, List[str]]:
    """
    Map each user to the supplementary groups listing them as a member.

    Users that belong to no group are absent from the result.
    """
    wanted = set(user_names)
    out: Dict[str, List[str]] = {}
    for group_name, members in snapshot.group_members().items():
        for user_name in members:
            if user_name in wanted:
                out.setdefault(user_name, []).append(group_name)
    return out


@dataclass(frozen=True)
class StaticSnapshot:
    """
    Fixed user/group data, e.g. for tests or for replaying a run.
    """

    users: FrozenSet[str] = frozenset()
    groups: Mapping[str, List[str]] = field(default_factory=dict)

    def user_names(self) -> FrozenSet[str]:
        return frozenset(self.users)

    def group_members(self) -> Mapping[str, List[str]]:
        return {name: list(members) for name, members in self.groups.items()}


class SystemSnapshot:
    """
    Snapshot of the local passwd and group databases, taken once on
    construction so every component of a run sees the same state.
    """

    def __init__(self) -> None:
        self._users = frozenset(e.pw_name for e in pwd.getpwall())
        self._groups = {e.gr_name: list(e.gr_mem) for e in grp.getgrall()}

    def user_names(self) -> FrozenSet[str]:
        return self._users

    def group_members(self) -> Mapping[str, List[str]]:
        return {name: list(members) for name, members in self._groups.items()}
