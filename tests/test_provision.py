"""
Unit tests for directory provisioning.

chown is replaced by a recorder so the tests run without root.
"""

import io
import os
import stat
import tempfile
import unittest
from pathlib import Path

from rich.console import Console

from sdcsite.parse import build_roster
from sdcsite.provision import (
    Admin,
    ProvisionStatus,
    Provisioner,
    resolve_owner,
)
from sdcsite.system import StaticSnapshot


ROWS = [
    ["student", "2023", "Fall", "CS101", "jdoe", "Jane Doe"],
    ["student", "2023", "Fall", "CS101", "ghost", "Gone Student"],
    ["project", "2023", "Fall", "CS401", "capstone1", "jdoe", "Capstone Alpha"],
]

SNAPSHOT = StaticSnapshot(
    users=frozenset({"root", "jdoe"}),
    groups={"root": [], "jdoe": [], "sdc_capstone1": ["jdoe"]},
)


class Recorder:
    def __init__(self) -> None:
        self.calls: list = []

    def __call__(self, path: Path, user: str, group: str) -> None:
        self.calls.append((Path(path), user, group))


class TestResolveOwner(unittest.TestCase):
    def test_known_user(self) -> None:
        self.assertEqual(resolve_owner("jdoe", "jdoe", SNAPSHOT, Admin()), ("jdoe", "jdoe"))

    def test_unknown_user_falls_back_to_admin(self) -> None:
        self.assertEqual(resolve_owner("ghost", "ghost", SNAPSHOT, Admin()), ("root", "root"))

    def test_custom_admin(self) -> None:
        admin = Admin(user="www", group="www-data")
        self.assertEqual(resolve_owner("ghost", "ghost", SNAPSHOT, admin), ("www", "www-data"))

    def test_missing_group_falls_back_to_admin_group(self) -> None:
        self.assertEqual(resolve_owner("root", "sdc_new", SNAPSHOT, Admin()), ("root", "root"))

    def test_project_group(self) -> None:
        self.assertEqual(resolve_owner("root", "sdc_capstone1", SNAPSHOT, Admin()), ("root", "sdc_capstone1"))


class TestProvisioner(unittest.TestCase):
    def setUp(self) -> None:
        self.buf = io.StringIO()
        self.console = Console(file=self.buf, width=200, color_system=None)
        self.chown = Recorder()
        self.roster = build_roster(ROWS)

    def test_creates_tree(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d) / "site"
            p = Provisioner(SNAPSHOT, self.console, dry_run=False, chown=self.chown)
            results = p.make_directories(root, self.roster)

            self.assertTrue(all(r.status is ProvisionStatus.CREATED for r in results))
            self.assertEqual(
                [r.path for r in results],
                [
                    root,
                    root / "students",
                    root / "students" / "jdoe",
                    root / "students" / "ghost",
                    root / "projects",
                    root / "projects" / "capstone1",
                ],
            )

            self.assertEqual(stat.S_IMODE(os.stat(root).st_mode), 0o755)
            self.assertEqual(stat.S_IMODE(os.stat(root / "students" / "jdoe").st_mode), 0o711)
            # the setgid bit may be dropped for unprivileged users
            project_mode = stat.S_IMODE(os.stat(root / "projects" / "capstone1").st_mode)
            self.assertEqual(project_mode & 0o777, 0o771)

        owners = {path.name: (user, group) for path, user, group in self.chown.calls}
        self.assertEqual(owners["jdoe"], ("jdoe", "jdoe"))
        self.assertEqual(owners["ghost"], ("root", "root"))
        self.assertEqual(owners["capstone1"], ("root", "sdc_capstone1"))
        self.assertEqual(owners["students"], ("root", "root"))

        project = [r for r in results if r.path.name == "capstone1"][0]
        self.assertEqual(project.mode, 0o2771)

    def test_second_run_reports_existing(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d) / "site"
            p = Provisioner(SNAPSHOT, self.console, dry_run=False, chown=self.chown)
            first = p.make_directory(root, "root", "root", 0o755)
            second = p.make_directory(root, "root", "root", 0o755)

        self.assertIs(first.status, ProvisionStatus.CREATED)
        self.assertIs(second.status, ProvisionStatus.ALREADY_EXISTS)
        self.assertEqual(len(self.chown.calls), 1)
        self.assertIn("already exists", self.buf.getvalue())

    def test_dry_run_touches_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d) / "site"
            p = Provisioner(SNAPSHOT, self.console, dry_run=True, chown=self.chown)
            results = p.make_directories(root, self.roster)
            self.assertFalse(root.exists())

        self.assertTrue(all(r.status is ProvisionStatus.DRY_RUN for r in results))
        self.assertEqual(self.chown.calls, [])
        out = self.buf.getvalue()
        self.assertIn(f"mkdir {root / 'students' / 'jdoe'}", out)
        self.assertIn("mode=2771", out)


if __name__ == "__main__":
    unittest.main()
