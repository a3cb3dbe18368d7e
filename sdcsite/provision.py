"""
Directory provisioning.

Layout created under the site root:

    <root>/                          admin:admin        0755
    <root>/students/                 admin:admin        0755
    <root>/students/<user>/          user:user          0711
    <root>/projects/                 admin:admin        0755
    <root>/projects/<directory>/     admin:sdc_<group>  2771

Creation is idempotent: an existing directory is reported and left
alone, including its owner and mode.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Tuple

from rich.console import Console

from sdcsite.actions import report
from sdcsite.model import Roster
from sdcsite.system import Snapshot


STUDENTS_DIRECTORY = "students"
PROJECTS_DIRECTORY = "projects"

ROOT_MODE = 0o755
STUDENT_MODE = 0o711
PROJECT_MODE = 0o2771


class ProvisionStatus(Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already exists"
    DRY_RUN = "dry-run"


@dataclass(frozen=True)
class Admin:
    user: str = "root"
    group: str = "root"


@dataclass(frozen=True)
class ProvisionResult:
    path: Path
    user: str
    group: str
    mode: int
    status: ProvisionStatus


Chown = Callable[[Path, str, str], None]


def default_chown(path: Path, user: str, group: str) -> None:
    shutil.chown(path, user=user, group=group)


def resolve_owner(user: str, group: str, snapshot: Snapshot, admin: Admin) -> Tuple[str, str]:
    """
    Owner and group a path should get.

    Unknown user -> admin user and group. Known user but a group the
    group database doesn't have (yet) -> admin group.
    """
    if user not in snapshot.user_names():
        return admin.user, admin.group
    if group not in snapshot.group_members():
        return user, admin.group
    return user, group


class Provisioner:
    def __init__(
        self,
        snapshot: Snapshot,
        console: Console,
        dry_run: bool = True,
        admin: Admin | None = None,
        chown: Chown = default_chown,
    ) -> None:
        self.snapshot = snapshot
        self.console = console
        self.dry_run = dry_run
        self.admin = admin or Admin()
        self.chown = chown

    def make_directory(self, path: Path, user: str, group: str, mode: int) -> ProvisionResult:
        user, group = resolve_owner(user, group, self.snapshot, self.admin)
        report(self.console, f"making directory {path} user={user} group={group} mode={mode:o}")

        if self.dry_run:
            report(self.console, f"mkdir {path}")
            return ProvisionResult(path, user, group, mode, ProvisionStatus.DRY_RUN)

        try:
            os.mkdir(path, mode)
        except FileExistsError:
            report(self.console, f"directory {path} already exists")
            return ProvisionResult(path, user, group, mode, ProvisionStatus.ALREADY_EXISTS)

        # mkdir honours the umask and drops the setgid bit
        os.chmod(path, mode)
        self.chown(path, user, group)
        return ProvisionResult(path, user, group, mode, ProvisionStatus.CREATED)

    def make_directories(self, root: Path, roster: Roster) -> List[ProvisionResult]:
        admin = self.admin
        results = [self.make_directory(root, admin.user, admin.group, ROOT_MODE)]

        base = root / STUDENTS_DIRECTORY
        results.append(self.make_directory(base, admin.user, admin.group, ROOT_MODE))
        for student in roster.students.values():
            results.append(
                self.make_directory(base / student.user_name, student.user_name, student.user_name, STUDENT_MODE)
            )

        base = root / PROJECTS_DIRECTORY
        results.append(self.make_directory(base, admin.user, admin.group, ROOT_MODE))
        for project in roster.projects.values():
            results.append(
                self.make_directory(base / project.directory_name, admin.user, project.group_name, PROJECT_MODE)
            )

        return results
