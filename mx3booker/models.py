"""
Typed records produced by the MX3 booking client.

Slots and reservations are rebuilt from markup on every fetch and are never
persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    RECURRING = "recurring"
    WINDOW_CLOSED = "window_closed"


class StationType(str, Enum):
    PRIVATE_STATION = "private_station"
    OPEN_GYM = "open_gym"
    CARDIO = "cardio"


class BookingErrorKind(str, Enum):
    NO_CREDITS = "no_credits"
    DUPLICATE = "duplicate"
    CONCURRENT = "concurrent"
    INVALID = "invalid"
    SESSION_EXPIRED = "session_expired"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Station:
    """Static catalog entry for a bookable station."""

    id: int
    name: str
    type: StationType
    duration_minutes: int


@dataclass
class TimeSlot:
    station_id: int
    station_name: str
    station_type: StationType
    date: str  # YYYY-MM-DD
    time: str  # h:mmam/pm
    status: SlotStatus


@dataclass
class Reservation:
    """An upcoming booking together with the fields needed to cancel it."""

    station_id: int
    station_name: str
    date: str
    time: str
    cancel_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BookingSuccess:
    message: str

    success: ClassVar[bool] = True


@dataclass(frozen=True)
class BookingFailure:
    error: BookingErrorKind
    message: str

    success: ClassVar[bool] = False


BookingResult = Union[BookingSuccess, BookingFailure]


@dataclass
class ScheduleResult:
    slots: list[TimeSlot] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    date: str | None = None


@dataclass(frozen=True)
class CancelResult:
    success: bool
    message: str
