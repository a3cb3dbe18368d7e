"""
Central data model definitions used across the project.

This module defines the canonical structure of Student and Project objects
so that parsing, group reconciliation, directory provisioning and rendering
all share the same field names.

A Roster is built once per run by sdcsite.parse and is treated as
read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


SDC_GROUP_PREFIX = "sdc_"

GROUP_NAME_MAX_LENGTH = 16


class Semester(Enum):
    """
    Academic terms, declared in calendar order within one year.
    """

    SPRING = "Spring"
    SUMMER_I = "SummerI"
    SUMMER_II = "SummerII"
    FALL = "Fall"

    @property
    def rank(self) -> int:
        return list(Semester).index(self)

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(s.value for s in cls)

    def __str__(self) -> str:
        return self.value


def make_group_name(directory_name: str) -> str:
    """
    Derive the OS group name of a project directory.

    "sdc_" + directory name, lowercased, cut to 16 characters.
    """
    return f"{SDC_GROUP_PREFIX}{directory_name}".lower()[:GROUP_NAME_MAX_LENGTH]


def is_sdc_group(group_name: str) -> bool:
    return group_name.startswith(SDC_GROUP_PREFIX)


@dataclass(frozen=True)
class Student:
    """
    Represents one student row of the roster CSV.
    """

    year: int
    semester: Semester
    class_name: str
    user_name: str
    name: str

    @property
    def term(self) -> Tuple[int, Semester]:
        return (self.year, self.semester)


@dataclass(frozen=True)
class Project:
    """
    Represents one project row; students are resolved Student objects
    in the order the CSV lists them.
    """

    year: int
    semester: Semester
    class_name: str
    name: str
    directory_name: str
    students: Tuple[Student, ...]
    group_name: str = field(init=False)

    def __post_init__(self) -> None:
        # frozen dataclass: derived field has to go through object.__setattr__
        object.__setattr__(self, "group_name", make_group_name(self.directory_name))

    @property
    def term(self) -> Tuple[int, Semester]:
        return (self.year, self.semester)

    def has_member(self, user_name: str) -> bool:
        return any(s.user_name == user_name for s in self.students)


@dataclass(frozen=True)
class Roster:
    """
    The validated set of students (by user name) and projects
    (by directory name) for one run.
    """

    students: Mapping[str, Student]
    projects: Mapping[str, Project]

    def __post_init__(self) -> None:
        object.__setattr__(self, "students", MappingProxyType(dict(self.students)))
        object.__setattr__(self, "projects", MappingProxyType(dict(self.projects)))

    def project_group_names(self) -> set[str]:
        return {p.group_name for p in self.projects.values()}

    def projects_of(self, user_name: str) -> list[Project]:
        return [p for p in self.projects.values() if p.has_member(user_name)]

    def terms(self) -> set[Tuple[int, Semester]]:
        """
        Distinct (year, semester) pairs of all students and projects.
        """
        out = {s.term for s in self.students.values()}
        out.update(p.term for p in self.projects.values())
        return out
