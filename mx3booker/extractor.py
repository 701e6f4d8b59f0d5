"""
Extraction of booking data from MX3 page markup.

Each function parses its input with BeautifulSoup and returns fresh records;
nothing is cached between calls.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from bs4 import BeautifulSoup

from mx3booker.classifier import classify_slot_status
from mx3booker.exceptions import ParseError
from mx3booker.models import Reservation, TimeSlot
from mx3booker.stations import STATIONS

logger = logging.getLogger(__name__)

SLOT_ID_PATTERN = re.compile(r"^res_time_(\d+)_(\d{4}-\d{2}-\d{2})_(.+)$")
UNRESERVE_PATTERN = re.compile(r"unreserve=(\d+)")
TIME_PATTERN = re.compile(r"(\d{1,2}:\d{2}(?:am|pm))", re.IGNORECASE)
MONTH_DAY_PATTERN = re.compile(r"(\d{2})/(\d{2})")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

CREDIT_COUNTER_ID = "credit_count"
DAY_BOX_CLASS = "day-box"


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_schedule(html: str) -> list[TimeSlot]:
    """
    Extract every time slot from a day's schedule markup.

    Slots are ``<p id="res_time_{stationId}_{date}_{time}">`` elements
    wrapping a link whose title and classes encode the slot state.

    Args:
        html: Schedule markup returned for a ``refreshDate`` request

    Returns:
        Time slots in document order; unknown stations are skipped
    """
    soup = _parse(html)
    slots = []

    for element in soup.find_all(id=SLOT_ID_PATTERN):
        match = SLOT_ID_PATTERN.match(element["id"])
        station_id, slot_date, slot_time = match.groups()

        station = STATIONS.get(int(station_id))
        if station is None:
            logger.debug(f"Skipping slot for unknown station {station_id}")
            continue

        link = element.find("a")
        if link is None:
            continue

        status = classify_slot_status(link.get("title", ""), link.get("class", []))
        slots.append(
            TimeSlot(
                station_id=station.id,
                station_name=station.name,
                station_type=station.type,
                date=slot_date,
                time=slot_time,
                status=status,
            )
        )

    return slots


def extract_credits(raw_text: str) -> int:
    """
    Extract the remaining credit count.

    The AJAX endpoint answers with a bare number; full pages carry it in
    ``<b id="credit_count">``.

    Raises:
        ParseError: If neither form yields an integer
    """
    trimmed = raw_text.strip()

    if INTEGER_PATTERN.match(trimmed):
        return int(trimmed)

    counter = _parse(trimmed).find(id=CREDIT_COUNTER_ID)
    if counter is not None:
        value = counter.get_text(strip=True)
        if INTEGER_PATTERN.match(value):
            return int(value)

    snippet = trimmed[:100]
    raise ParseError(f"Could not parse credit count from: {snippet}", snippet=snippet)


def extract_reservations(html: str, today: date | None = None) -> list[Reservation]:
    """
    Extract upcoming reservations from the full reservations page.

    Each booking is a row such as
    ``Noe 1: Monday 02/09 at 9:00pm <a href="...?unreserve=128242">cancel</a>``.
    The row only shows month and day, so the year is taken from ``today``;
    bookings in the next calendar year come out with the current year.

    Args:
        html: Full-page markup; the AJAX variant of this page is always empty
        today: Reference date for the year, defaults to the current date

    Returns:
        Reservations in document order; rows missing a time, date or known
        station are dropped
    """
    if not html or not html.strip():
        return []

    year = (today or date.today()).year
    soup = _parse(html)
    reservations = []

    for link in soup.select('a[href*="unreserve="]'):
        id_match = UNRESERVE_PATTERN.search(link.get("href", ""))
        if not id_match:
            continue
        reservation_id = id_match.group(1)

        row_text = link.parent.get_text()

        time_match = TIME_PATTERN.search(row_text)
        date_match = MONTH_DAY_PATTERN.search(row_text)
        station = next(
            (s for s in STATIONS.values() if s.name in row_text),
            None,
        )
        if not (time_match and date_match and station):
            logger.debug(f"Dropping unrecognised reservation row: {row_text.strip()}")
            continue

        month, day = date_match.groups()
        reservations.append(
            Reservation(
                station_id=station.id,
                station_name=station.name,
                date=f"{year}-{month}-{day}",
                time=time_match.group(1).lower(),
                cancel_params={
                    "v2": "true",
                    "unreserve": reservation_id,
                    "resourceID": str(station.id),
                    "loadAjax": "true",
                    "layout": "blank",
                },
            )
        )

    return reservations


def extract_available_dates(html: str) -> list[str]:
    """Return the bookable dates listed in the page's day boxes."""
    soup = _parse(html)
    return [
        element["title"]
        for element in soup.find_all(class_=DAY_BOX_CLASS, title=True)
        if ISO_DATE_PATTERN.match(element["title"])
    ]
