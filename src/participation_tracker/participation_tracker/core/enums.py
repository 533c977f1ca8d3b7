from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization. Each role includes the ones below it."""

    USER = "user"
    MENTOR = "mentor"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {Role.USER: 0, Role.MENTOR: 1, Role.ADMIN: 2}


class Bucket(str, Enum):
    """Which list of an attendance year an entry lives in."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class AttendanceKind(str, Enum):
    """Category of an attendance entry, derived from its flags."""

    REGULAR = "regular"
    SMALL_GROUP = "smallgroup"
    BONUS = "bonus"

    @property
    def suffix(self) -> str:
        return {
            AttendanceKind.REGULAR: "",
            AttendanceKind.SMALL_GROUP: "Small",
            AttendanceKind.BONUS: "Bonus",
        }[self]


class PresenceState(str, Enum):
    PRESENT = "present"
    UNVERIFIED = "unverified"
    ABSENT = "absent"


class PresenceStatus(str, Enum):
    """Attendance status of a student for one day and one category."""

    PRESENT = "present"
    PRESENT_SMALL = "presentSmall"
    PRESENT_BONUS = "presentBonus"
    UNVERIFIED = "unverified"
    UNVERIFIED_SMALL = "unverifiedSmall"
    UNVERIFIED_BONUS = "unverifiedBonus"
    ABSENT = "absent"
    ABSENT_SMALL = "absentSmall"
    ABSENT_BONUS = "absentBonus"

    @classmethod
    def of(cls, state: PresenceState, kind: AttendanceKind) -> "PresenceStatus":
        return cls(state.value + kind.suffix)

    @property
    def state(self) -> PresenceState:
        for state in PresenceState:
            if self.value.startswith(state.value):
                return state
        raise ValueError(self.value)

    @property
    def kind(self) -> AttendanceKind:
        for kind in (AttendanceKind.SMALL_GROUP, AttendanceKind.BONUS):
            if self.value.endswith(kind.suffix):
                return kind
        return AttendanceKind.REGULAR

    def as_kind(self, kind: AttendanceKind) -> "PresenceStatus":
        """Map a generic status onto `kind`; variant statuses are kept as-is."""
        if self.kind is not AttendanceKind.REGULAR:
            return self
        return PresenceStatus.of(self.state, kind)
