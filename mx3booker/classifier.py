"""
Classification of raw booking-site responses into typed outcomes.

The site answers booking requests with either a bare status word or the
re-rendered slot markup, and expired sessions with a sign-in page. These
functions never raise.
"""

from __future__ import annotations

from typing import Iterable

from mx3booker.models import (
    BookingErrorKind,
    BookingFailure,
    BookingResult,
    BookingSuccess,
    SlotStatus,
)

SIGN_IN_REQUIRED = "Sign In Required"

BOOKING_FAILURES: dict[str, BookingFailure] = {
    "reload": BookingFailure(BookingErrorKind.NO_CREDITS, "Out of gym credits"),
    "duplicate": BookingFailure(BookingErrorKind.DUPLICATE, "Slot already reserved"),
    "concurrent": BookingFailure(
        BookingErrorKind.CONCURRENT, "Overlapping reservation not allowed"
    ),
    "invalid": BookingFailure(BookingErrorKind.INVALID, "Invalid station or time"),
}


def classify_slot_status(title: str, css_classes: Iterable[str]) -> SlotStatus:
    """
    Derive a slot's status from its link title and class list.

    Title rules are checked before class rules; the first match wins.

    Args:
        title: The ``title`` attribute of the slot link
        css_classes: Class tokens of the slot link

    Returns:
        The slot status
    """
    classes = set(css_classes)

    if title == "Reservation window closed":
        return SlotStatus.WINDOW_CLOSED
    if title == "Reserved for recurring appointment.":
        return SlotStatus.RECURRING
    if title.startswith("Reserved by"):
        return SlotStatus.RESERVED
    if title == "Click to reserve" or not classes & {"reserved", "gray"}:
        return SlotStatus.AVAILABLE
    if "reserved" in classes:
        return SlotStatus.RESERVED
    if "gray" in classes:
        return SlotStatus.WINDOW_CLOSED
    return SlotStatus.AVAILABLE


def classify_booking_response(raw_text: str) -> BookingResult:
    """
    Map a booking response body to a booking result.

    Known status words are failures. Any other non-empty body is the
    re-rendered slot markup, which means the booking went through.
    """
    trimmed = raw_text.strip()

    if trimmed in BOOKING_FAILURES:
        return BOOKING_FAILURES[trimmed]
    if trimmed:
        return BookingSuccess("Slot booked successfully")
    return BookingFailure(BookingErrorKind.INVALID, "Empty response from server")


def is_session_expired(raw_text: str) -> bool:
    return SIGN_IN_REQUIRED in raw_text
