"""Presence of a student on a given day.

A student's day can be in one of three states per category (regular,
small group, bonus): present (a verified entry exists), unverified (a
self-reported entry exists) or absent. Reads and writes both take the class
year explicitly.

Transitions are table driven: each target status names the buckets whose
entries for that day and category are removed, and the bucket that must hold
the single surviving entry (``None`` for the absent statuses). Applying a
transition therefore never leaves more than one entry per day and category
across both buckets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..classyears.model import ClassYear
from ..common.datetime_utils import DateLike, to_day, today_local
from ..core.enums import AttendanceKind, Bucket, PresenceState, PresenceStatus
from ..students.model import AttendanceEntry, AttendanceYear, Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    kind: AttendanceKind
    source: tuple[Bucket, ...]
    dest: Optional[Bucket]


def _build_transitions() -> dict[PresenceStatus, Transition]:
    table: dict[PresenceStatus, Transition] = {}
    for kind in AttendanceKind:
        table[PresenceStatus.of(PresenceState.PRESENT, kind)] = Transition(
            kind=kind, source=(Bucket.UNVERIFIED,), dest=Bucket.VERIFIED
        )
        table[PresenceStatus.of(PresenceState.UNVERIFIED, kind)] = Transition(
            kind=kind, source=(Bucket.VERIFIED,), dest=Bucket.UNVERIFIED
        )
        table[PresenceStatus.of(PresenceState.ABSENT, kind)] = Transition(
            kind=kind, source=(Bucket.VERIFIED, Bucket.UNVERIFIED), dest=None
        )
    return table


TRANSITIONS: dict[PresenceStatus, Transition] = _build_transitions()


def presence_in_year(
    year: Optional[AttendanceYear],
    day: date,
    kind: AttendanceKind = AttendanceKind.REGULAR,
) -> PresenceStatus:
    if year is None:
        return PresenceStatus.of(PresenceState.ABSENT, kind)
    if year.find_latest(Bucket.VERIFIED, day, kind):
        return PresenceStatus.of(PresenceState.PRESENT, kind)
    if year.find_latest(Bucket.UNVERIFIED, day, kind):
        return PresenceStatus.of(PresenceState.UNVERIFIED, kind)
    return PresenceStatus.of(PresenceState.ABSENT, kind)


def get_presence(
    student: Student,
    class_year: Optional[ClassYear],
    *,
    kind: AttendanceKind = AttendanceKind.REGULAR,
    today: Optional[DateLike] = None,
) -> PresenceStatus:
    """Today's status of `student` for one category of attendance in `class_year`."""
    day = to_day(today) if today is not None else today_local()
    if class_year is None:
        return PresenceStatus.of(PresenceState.ABSENT, kind)
    return presence_in_year(student.year_for(class_year.class_year_id), day, kind)


def apply_transition(year: AttendanceYear, status: PresenceStatus, day: date) -> bool:
    """Move `year` to `status` for `day`. Returns True when the buckets changed."""
    transition = TRANSITIONS[PresenceStatus(status)]

    changed = False
    for bucket in transition.source:
        changed = year.discard(bucket, day, transition.kind) or changed

    if transition.dest is not None and year.find_latest(transition.dest, day, transition.kind) is None:
        year.entries(transition.dest).append(AttendanceEntry.for_kind(day, transition.kind))
        changed = True

    return changed


def set_presence(
    student: Student,
    class_year: ClassYear,
    status: PresenceStatus,
    *,
    kind: Optional[AttendanceKind] = None,
    today: Optional[DateLike] = None,
) -> bool:
    """Set today's status of `student` in `class_year`.

    When `kind` is given, generic statuses (``present``, ``unverified``,
    ``absent``) are mapped onto that category first. The attendance year is
    created on first use. Returns True when the student's entries changed.
    """
    status = PresenceStatus(status)
    if kind is not None:
        status = status.as_kind(AttendanceKind(kind))
    day = to_day(today) if today is not None else today_local()

    year = student.ensure_year(class_year.class_year_id)
    changed = apply_transition(year, status, day)
    if changed:
        logger.info(
            "Student %s is now %s on %s (class year %s)",
            student.student_id,
            status.value,
            day.isoformat(),
            class_year.semester,
        )
    else:
        logger.debug("Student %s already %s on %s", student.student_id, status.value, day.isoformat())
    return changed
