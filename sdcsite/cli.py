"""
CLI (Command Line Interface).

    sdcsite -c roster.csv -d /var/www/sdc          # live run
    sdcsite -c roster.csv -d /var/www/sdc --test   # dry run, print only

A run always goes through the same steps:

1. read and validate the roster CSV
2. delete stale sdc_ groups (group creation is only reported)
3. plan per-student group memberships (reported, never applied)
4. create the students/ and projects/ directory tree
5. write index.html and a.css

Any problem in the CSV aborts the run before the system is touched.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from sdcsite.actions import Runner, execute, report, run_command
from sdcsite.errors import CommandError, RosterError
from sdcsite.groups import membership_directives, plan_memberships, print_membership_plans, reconcile_groups
from sdcsite.parse import load_roster
from sdcsite.provision import Admin, Provisioner
from sdcsite.render import render_site, write_site
from sdcsite.system import Snapshot, SystemSnapshot


@dataclass
class RunConfig:
    csv_path: Path
    directory: Path
    dry_run: bool = False
    admin_user: str = "root"
    admin_group: str = "root"

    @property
    def admin(self) -> Admin:
        return Admin(user=self.admin_user, group=self.admin_group)


def run(
    config: RunConfig,
    snapshot: Snapshot,
    console: Console,
    runner: Runner = run_command,
    provisioner: Provisioner | None = None,
) -> None:
    """
    Execute one complete run. Raises RosterError / CommandError / OSError.
    """
    roster = load_roster(config.csv_path)
    report(console, f"Roster: students={len(roster.students)} | projects={len(roster.projects)}")

    group_plan = reconcile_groups(roster, snapshot, dry_run=config.dry_run)
    execute(group_plan.directives, console, runner=runner)

    plans = plan_memberships(roster, snapshot)
    print_membership_plans(plans, console)
    execute(membership_directives(plans), console, runner=runner)

    if provisioner is None:
        provisioner = Provisioner(snapshot, console, dry_run=config.dry_run, admin=config.admin)
    provisioner.make_directories(config.directory, roster)

    html, css = render_site(roster)
    write_site(config.directory, html, css, console, dry_run=config.dry_run, admin=config.admin, chown=provisioner.chown)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser.
    """
    parser = argparse.ArgumentParser(
        prog="sdcsite",
        description="Build the Senior Design/Capstone student and project site",
    )
    parser.add_argument("-c", "--csv-file", dest="csv_file", type=Path, required=True, help="Roster CSV file")
    parser.add_argument(
        "-d", "--directory", type=Path, required=True, help="Base directory (SDC web root)"
    )
    parser.add_argument(
        "-t", "--test", action="store_true", help="Test mode. (Don't actually create anything.)"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Exits via SystemExit with a return code.
    """
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]

    # no arguments at all: show usage
    if not argv:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(argv)
    config = RunConfig(csv_path=args.csv_file, directory=args.directory, dry_run=args.test)

    console = Console(highlight=False, soft_wrap=True, emoji=False)
    err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)
    try:
        run(config, SystemSnapshot(), console)
    except (RosterError, CommandError, OSError) as e:
        report(err_console, f"error: {e}")
        raise SystemExit(1)

    raise SystemExit(0)
