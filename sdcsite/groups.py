"""
SDC group reconciliation and per-student membership planning.

Only "sdc_" groups are touched. Stale sdc groups are deleted; missing
groups and membership changes are computed but suppressed, so an
operator can read the plan without the tool ever running groupadd or
usermod.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from sdcsite.actions import Directive, Disposition, live_or_dry
from sdcsite.model import Roster, is_sdc_group
from sdcsite.system import Snapshot, groups_by_member, sdc_group_names


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GroupPlan:
    to_add: frozenset[str]
    to_remove: frozenset[str]
    directives: List[Directive] = field(default_factory=list)


def diff_groups(existing: set[str], desired: set[str]) -> tuple[set[str], set[str]]:
    """
    Return (to_add, to_remove) for sdc group names.
    """
    return set(desired) - set(existing), set(existing) - set(desired)


def reconcile_groups(roster: Roster, snapshot: Snapshot, dry_run: bool) -> GroupPlan:
    existing = sdc_group_names(snapshot)
    desired = roster.project_group_names()
    to_add, to_remove = diff_groups(existing, desired)

    directives = [Directive(("groupadd", g), Disposition.SUPPRESSED) for g in sorted(to_add)]
    directives += [Directive(("groupdel", g), live_or_dry(dry_run)) for g in sorted(to_remove)]

    return GroupPlan(to_add=frozenset(to_add), to_remove=frozenset(to_remove), directives=directives)


# ---------------------------------------------------------------------------
# Memberships
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MembershipPlan:
    user_name: str
    current: List[str]
    desired: List[str]
    to_add: List[str]
    to_remove: List[str]

    @property
    def changed(self) -> bool:
        return bool(self.to_add or self.to_remove)

    def directive(self) -> Directive | None:
        """
        usermod directive setting the full supplementary group list.
        Always SUPPRESSED; None when nothing would change.
        """
        if not self.changed:
            return None
        return Directive(("usermod", "-G", ",".join(self.desired), self.user_name), Disposition.SUPPRESSED)


def plan_membership(user_name: str, project_groups: List[str], current: List[str]) -> MembershipPlan:
    """
    Keep every non-sdc group the user is in and replace their sdc
    groups with the groups of their projects.
    """
    current_set = set(current)
    non_sdc = {g for g in current_set if not is_sdc_group(g)}
    desired = set(project_groups) | non_sdc

    return MembershipPlan(
        user_name=user_name,
        current=sorted(current_set),
        desired=sorted(desired),
        to_add=sorted(desired - current_set),
        to_remove=sorted(current_set - desired),
    )


def plan_memberships(roster: Roster, snapshot: Snapshot) -> List[MembershipPlan]:
    memberships = groups_by_member(snapshot, roster.students.keys())
    plans: List[MembershipPlan] = []
    for user_name in sorted(roster.students):
        project_groups = [p.group_name for p in roster.projects_of(user_name)]
        plans.append(plan_membership(user_name, project_groups, memberships.get(user_name, [])))
    return plans


def membership_directives(plans: List[MembershipPlan]) -> List[Directive]:
    out: List[Directive] = []
    for plan in plans:
        d = plan.directive()
        if d is not None:
            out.append(d)
    return out


def print_membership_plans(plans: List[MembershipPlan], console: Console) -> None:
    pending = [p for p in plans if p.changed]
    if not pending:
        return

    table = Table(title="Group membership changes (not applied)", box=box.SIMPLE)
    table.add_column("User")
    table.add_column("Add")
    table.add_column("Remove")
    for p in pending:
        table.add_row(p.user_name, ", ".join(p.to_add), ", ".join(p.to_remove))
    console.print(table)
