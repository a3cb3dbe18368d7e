"""
Parsing (CSV rows -> Roster).

- Reads the roster CSV file into raw rows
- Classifies rows by their tag field ("student" / "project")
- Validates every field and resolves project members
- Returns an immutable Roster

Row layout after the tag field:

    student: year, semester, class name, user name, name
    project: year, semester, class name, directory name, user names, name

Student rows are always consumed before project rows, so a project may
reference any student of the file regardless of row order.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from sdcsite.errors import (
    InputFileError,
    IntegrityError,
    StructuralError,
    UnrecognizedRecordError,
    ValidationError,
)
from sdcsite.model import Project, Roster, Semester, Student
from sdcsite.validate import (
    is_valid_directory_name,
    is_valid_semester,
    is_valid_user_name,
    is_valid_year,
)


STUDENT_RECORD_NUM_FIELDS = 5
PROJECT_RECORD_NUM_FIELDS = 6

STUDENT_TAG = "student"
PROJECT_TAG = "project"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_blank(row: Sequence[str]) -> bool:
    return all(not (cell or "").strip() for cell in row)


def _has_tag(row: Sequence[str], tag: str) -> bool:
    return bool(row) and tag in (row[0] or "").lower()


def _check_field_count(kind: str, expected: int, row: Sequence[str]) -> List[str]:
    """
    Strip the tag field and make sure exactly `expected` fields remain.
    """
    fields = list(row[1:])
    if len(fields) != expected:
        raise StructuralError(kind, expected, len(fields), row)
    return fields


def _parse_year(value: str, row: Sequence[str]) -> int:
    if not is_valid_year(value):
        raise ValidationError("year", value, row)
    return int(value)


def _parse_semester(value: str, row: Sequence[str]) -> Semester:
    if not is_valid_semester(value):
        raise ValidationError("semester", value, row)
    return Semester(value)


def _split_user_names(value: str) -> List[str]:
    # ordered set: keep first occurrence
    out: List[str] = []
    for token in (value or "").split(","):
        token = token.strip()
        if token and token not in out:
            out.append(token)
    return out


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def parse_student_record(row: Sequence[str]) -> Student:
    fields = _check_field_count(STUDENT_TAG, STUDENT_RECORD_NUM_FIELDS, row)
    year, semester, class_name, user_name, name = fields

    year_num = _parse_year(year, row)
    sem = _parse_semester(semester, row)
    if not is_valid_user_name(user_name):
        raise ValidationError("username", user_name, row)
    if not (name or "").split():
        raise ValidationError("name", name, row)

    return Student(
        year=year_num,
        semester=sem,
        class_name=class_name,
        user_name=user_name,
        name=name,
    )


def parse_project_record(row: Sequence[str], students: Dict[str, Student]) -> Project:
    fields = _check_field_count(PROJECT_TAG, PROJECT_RECORD_NUM_FIELDS, row)
    year, semester, class_name, directory_name, user_names, name = fields

    year_num = _parse_year(year, row)
    sem = _parse_semester(semester, row)
    if not is_valid_directory_name(directory_name):
        raise ValidationError("directory name", directory_name, row)

    names = _split_user_names(user_names)
    if not names:
        raise ValidationError("usernames", user_names, row)

    members: List[Student] = []
    for user_name in names:
        if user_name not in students:
            raise IntegrityError(f"student with username {user_name!r} does not exist")
        members.append(students[user_name])

    return Project(
        year=year_num,
        semester=sem,
        class_name=class_name,
        name=name,
        directory_name=directory_name,
        students=tuple(members),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_roster(rows: Iterable[Sequence[str]]) -> Roster:
    """
    Build a validated Roster from raw CSV rows.

    Raises a RosterError subclass on the first problem found.
    """
    records = [list(r) for r in rows if not _is_blank(r)]

    student_records = [r for r in records if _has_tag(r, STUDENT_TAG)]
    records = [r for r in records if not _has_tag(r, STUDENT_TAG)]

    students: Dict[str, Student] = {}
    for record in student_records:
        student = parse_student_record(record)
        if student.user_name in students:
            raise IntegrityError(f"student with username {student.user_name!r} already exists")
        students[student.user_name] = student

    project_records = [r for r in records if _has_tag(r, PROJECT_TAG)]
    records = [r for r in records if not _has_tag(r, PROJECT_TAG)]

    projects: Dict[str, Project] = {}
    groups: Dict[str, str] = {}
    for record in project_records:
        project = parse_project_record(record, students)
        if project.directory_name in projects:
            raise IntegrityError(f"project with directory name {project.directory_name!r} already exists")

        other = groups.get(project.group_name)
        if other is not None:
            raise IntegrityError(
                f"projects {other!r} and {project.directory_name!r} "
                f"share the group name {project.group_name!r}"
            )
        groups[project.group_name] = project.directory_name
        projects[project.directory_name] = project

    # there shouldn't be any more records
    if records:
        raise UnrecognizedRecordError(records)

    return Roster(students=students, projects=projects)


def read_rows(path: str | Path) -> List[List[str]]:
    """
    Read the roster CSV file (UTF-8) into a list of raw rows.

    Undecodable bytes and malformed CSV raise InputFileError.
    """
    data = Path(path).read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InputFileError(
            str(path), f"not valid UTF-8 (byte 0x{data[e.start]:02x} at offset {e.start})"
        ) from e

    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        return [row for row in reader]
    except csv.Error as e:
        raise InputFileError(str(path), f"line {reader.line_num}: {e}") from e


def load_roster(path: str | Path) -> Roster:
    return build_roster(read_rows(path))
