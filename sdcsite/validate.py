"""
Record validation.

Pure predicates used by the roster parser. They never raise and never
coerce: callers turn a False into a classified error.
"""

from __future__ import annotations

import re

from sdcsite.model import Semester


# ASCII digits only
_YEAR_RE = re.compile(r"[0-9]{4}")

# From the useradd man page:
#   [a-z_][a-z0-9_-]*[$]
# we accept the same set minus the trailing $.
_USER_NAME_RE = re.compile(r"[a-z_][a-z0-9_-]*")

_DIRECTORY_NAME_RE = re.compile(r"[A-Za-z0-9_]+")


def is_valid_year(value: str) -> bool:
    return _YEAR_RE.fullmatch(value or "") is not None


def is_valid_user_name(value: str) -> bool:
    return _USER_NAME_RE.fullmatch(value or "") is not None


def is_valid_semester(value: str) -> bool:
    return value in Semester.values()


def is_valid_directory_name(value: str) -> bool:
    return _DIRECTORY_NAME_RE.fullmatch(value or "") is not None
