"""
Chronology: the distinct (year, semester) terms of a roster, newest first.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from sdcsite.model import Roster, Semester


Term = Tuple[int, Semester]


def term_sort_key(term: Term) -> Tuple[int, int]:
    year, semester = term
    return (year, semester.rank)


def order_terms(terms: Iterable[Term]) -> List[Term]:
    """
    Deduplicate and sort descending: year first, then semester rank
    (Fall > SummerII > SummerI > Spring).
    """
    return sorted(set(terms), key=term_sort_key, reverse=True)


def roster_terms(roster: Roster) -> List[Term]:
    """
    Terms of every student and project in the roster, newest first.
    """
    return order_terms(roster.terms())
