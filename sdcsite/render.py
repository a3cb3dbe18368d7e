"""
Static site rendering.

Produces the index page (students and projects grouped by term, newest
term first) and the fixed stylesheet, and writes both into the site root.

Rendering is a pure function of the roster: the same roster always gives
byte-identical output.
"""

from __future__ import annotations

import os
from html import escape
from pathlib import Path
from typing import Iterable, List, Tuple

from rich.console import Console

from sdcsite.actions import report
from sdcsite.chronology import Term, roster_terms
from sdcsite.model import Project, Roster, Student
from sdcsite.provision import Admin, Chown, default_chown


INDEX_FILENAME = "index.html"
CSS_FILENAME = "a.css"
SITE_FILE_MODE = 0o644

CSS = """\
a, a:visited
{
\tbackground: inherit;
\tcolor: blue;
}

body, h1, h2
{
\tfont-family: Verdana;
}

#heading
{
\tmargin-bottom: 1em;
}
#heading h1
{
\tfont-size: 1.5em;
\tmargin: 0;
}

#studentsList, #projectsList
{
\tbackground: #f4f4f4;
\tborder: 1px solid #ccc;
\tfloat: left;
\tpadding: 0 1em;
}
#studentsList ul, #projectsList ul
{
\tlist-style: none;
\tmargin-top: 0;
\tpadding-top: 0;
}
#studentsList li, #projectsList li
{
\twhite-space: nowrap;
}
#studentsList h1, #projectsList h1
{
\tfont-size: 1.5em;
}
#studentsList h2, #projectsList h2
{
\tfont-size: 1.2em;
\tmargin-bottom: 0;
\tpadding-bottom: 0;
}
#projectsList>ul>li
{
\tmargin-bottom: 1em;
}
#projectsList
{
\tmargin-left: 1em;
}
"""

PAGE_TEMPLATE = """\
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" "http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
\t<head profile="http://www.w3.org/2005/11/profile">
\t\t<title>Senior Design/Capstone students and projects</title>
\t\t<link rel="stylesheet" href="/a.css" type="text/css" />
\t\t<meta http-equiv="Content-Type" content="text/html; charset=utf-8" />
\t</head>

\t<body>
\t\t<div id="heading">
\t\t\t<h1>Computer Science and Computer Engineering Department</h1>
\t\t\t<h1>Senior Design/Capstone</h1>
\t\t</div>

\t\t<div id="studentsList">
\t\t\t<h1>Students</h1>
{students}
\t\t</div>

\t\t<div id="projectsList">
\t\t\t<h1>Projects</h1>
{projects}
\t\t</div>
\t</body>
</html>
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def split_name(name: str) -> Tuple[str, str]:
    """
    "Jane Q Doe" -> ("Doe", "Jane Q")
    """
    parts = name.split()
    if not parts:
        return "", ""
    return parts[-1], " ".join(parts[:-1])


def display_name(name: str) -> str:
    surname, rest = split_name(name)
    return f"{surname}, {rest}" if rest else surname


def _student_key(student: Student) -> Tuple[str, str, str]:
    surname, rest = split_name(student.name)
    return (surname, rest, student.user_name)


def sort_students(students: Iterable[Student]) -> List[Student]:
    return sorted(students, key=_student_key)


def sort_projects(projects: Iterable[Project]) -> List[Project]:
    return sorted(projects, key=lambda p: (p.name, p.directory_name))


def _student_link(student: Student) -> str:
    href = escape(f"/students/{student.user_name}")
    return f'<a href="{href}">{escape(display_name(student.name))}</a>'


def _heading(term: Term) -> str:
    year, semester = term
    return f"\t\t\t<h2>{year} {semester}</h2>\n"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def render_students(roster: Roster, terms: List[Term]) -> str:
    out = ""
    for term in terms:
        students = sort_students(s for s in roster.students.values() if s.term == term)
        if not students:
            continue

        out += _heading(term)
        out += "\t\t\t<ul>\n"
        for student in students:
            out += f"\t\t\t\t<li>{_student_link(student)}</li>\n"
        out += "\t\t\t</ul>\n"
    return out


def render_projects(roster: Roster, terms: List[Term]) -> str:
    out = ""
    for term in terms:
        projects = sort_projects(p for p in roster.projects.values() if p.term == term)
        if not projects:
            continue

        out += _heading(term)
        out += "\t\t\t<ul>\n"
        for project in projects:
            href = escape(f"/projects/{project.directory_name}")
            out += "\t\t\t\t<li>\n"
            out += f'\t\t\t\t\t<a href="{href}">{escape(project.name)}</a>\n'
            out += "\t\t\t\t\t<ul>\n"
            for student in sort_students(project.students):
                out += f"\t\t\t\t\t\t<li>{_student_link(student)}</li>\n"
            out += "\t\t\t\t\t</ul>\n"
            out += "\t\t\t\t</li>\n"
        out += "\t\t\t</ul>\n"
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_site(roster: Roster) -> Tuple[str, str]:
    """
    Return (html, css) for the roster.
    """
    terms = roster_terms(roster)
    html = PAGE_TEMPLATE.format(
        students=render_students(roster, terms),
        projects=render_projects(roster, terms),
    )
    return html, CSS


def write_site(
    directory: str | Path,
    html: str,
    css: str,
    console: Console,
    dry_run: bool = True,
    admin: Admin | None = None,
    chown: Chown = default_chown,
) -> List[Path]:
    """
    Write index.html and a.css into the site root (admin-owned, 0644).

    In dry-run mode the content is printed instead and nothing is written.
    """
    if dry_run:
        report(console, "would have written html:")
        report(console, html)
        report(console, "would have written css:")
        report(console, css)
        return []

    admin = admin or Admin()
    root = Path(directory)
    written: List[Path] = []
    for filename, content in ((INDEX_FILENAME, html), (CSS_FILENAME, css)):
        path = root / filename
        path.write_text(content, encoding="utf-8")
        chown(path, admin.user, admin.group)
        os.chmod(path, SITE_FILE_MODE)
        report(console, f"wrote {path}")
        written.append(path)
    return written
