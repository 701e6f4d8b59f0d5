"""
Session-authenticated async client for the MX3 Fitness booking site.

The site has no JSON API. Every operation is a form POST to the location page,
and the answer is HTML or a bare status word. The client keeps the session
cookies itself, logs in on demand and logs in again once when the site
answers with its sign-in page.
"""

from __future__ import annotations

import logging

import httpx

from mx3booker.classifier import classify_booking_response, is_session_expired
from mx3booker.config import BookingConstants, BookingDetails
from mx3booker.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    SessionExpiredError,
)
from mx3booker.extractor import (
    extract_available_dates,
    extract_credits,
    extract_reservations,
    extract_schedule,
)
from mx3booker.models import (
    BookingErrorKind,
    BookingFailure,
    BookingResult,
    CancelResult,
    Credentials,
    Reservation,
    ScheduleResult,
)
from mx3booker.stations import resolve_station, station_names

logger = logging.getLogger(__name__)


def create_http_client() -> httpx.AsyncClient:
    """
    Create HTTP client with standard headers.

    Returns:
        Configured HTTP client that does not follow redirects
    """
    client = httpx.AsyncClient(
        timeout=BookingConstants.DEFAULT_TIMEOUT, follow_redirects=False
    )
    client.headers.update(
        {
            "User-Agent": BookingConstants.USER_AGENT,
            "Accept-Language": BookingConstants.ACCEPT_LANGUAGE,
            "Accept": BookingConstants.ACCEPT,
        }
    )
    return client


class MX3Client:
    """
    Booking client bound to one member account and one location.

    Operations must be awaited one at a time; the session cookies are
    replaced in place on re-login. An injected ``http_client`` is neither
    closed nor has its cookie jar touched; its jar is just never sent.

    Usage::

        async with MX3Client(credentials) as client:
            schedule = await client.get_schedule()
    """

    def __init__(
        self,
        credentials: Credentials,
        details: BookingDetails | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not credentials.username or not credentials.password:
            raise ConfigurationError(
                "MX3 credentials are required (username and password)"
            )
        self._credentials = credentials
        self._details = details or BookingDetails()
        self._cookies: dict[str, str] = {}
        self._owns_http_client = http_client is None
        self._http = http_client or create_http_client()

    async def __aenter__(self) -> MX3Client:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client and not self._http.is_closed:
            await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return bool(self._cookies)

    # --- Booking operations ---

    async def get_schedule(self, date: str | None = None) -> ScheduleResult:
        """
        Get every station's slots for one day.

        Args:
            date: Day in YYYY-MM-DD format, defaults to the first bookable day

        Returns:
            Slots for the day plus the list of bookable dates
        """
        main_html = await self._post_with_auth({})
        dates = extract_available_dates(main_html)

        target_date = date or (dates[0] if dates else None)
        if not target_date:
            logger.info("No bookable dates found")
            return ScheduleResult()

        logger.info(f"Fetching schedule for {target_date}")
        schedule_html = await self._post_with_auth(
            {"locID": self._details.location_id, "refreshDate": target_date}
        )
        return ScheduleResult(
            slots=extract_schedule(schedule_html), dates=dates, date=target_date
        )

    async def get_credits(self) -> int:
        text = await self._post_with_auth(
            {
                "checkCredits": "true",
                "forMember": "",
                "loadAjax": "true",
                "layout": "blank",
                "ajax": "true",
            }
        )
        return extract_credits(text)

    async def get_my_bookings(self) -> list[Reservation]:
        """
        Get the member's upcoming reservations.

        The AJAX flavour of this request always comes back empty, so the full
        page is requested instead.
        """
        html = await self._post_with_auth({"getReservations": "true", "forMember": ""})
        reservations = extract_reservations(html)
        logger.info(f"Found {len(reservations)} upcoming reservations")
        return reservations

    async def book_slot(
        self, station: str | int, date: str, time: str
    ) -> BookingResult:
        """
        Reserve one slot.

        Args:
            station: Station name (e.g. "Noe 1"), id (140) or id string ("140")
            date: Day in YYYY-MM-DD format
            time: Slot label such as "5:00am"

        Returns:
            BookingSuccess, or BookingFailure for refusals and unknown stations
        """
        resolved = resolve_station(station)
        if resolved is None:
            return BookingFailure(
                BookingErrorKind.INVALID,
                f"Unknown station: {station}. Valid names: {', '.join(station_names())}",
            )

        logger.info(f"Booking {resolved.name} on {date} at {time}")
        text = await self._post_with_auth(
            {
                "v2": "true",
                "reserve": str(resolved.id),
                "res_date": date,
                "res_time": time,
                "loadAjax": "true",
                "layout": "blank",
            }
        )
        result = classify_booking_response(text)
        if not result.success:
            logger.warning(f"Booking refused: {result.message}")
        return result

    async def cancel_booking(
        self, station_name: str, date: str, time: str
    ) -> CancelResult:
        """
        Cancel the reservation matching station, date and time.

        The cancel link id is only available from the reservations page, so
        the current bookings are fetched first.
        """
        station = resolve_station(station_name)
        if station is None:
            return CancelResult(
                False,
                f"Unknown station: {station_name}. Valid names: {', '.join(station_names())}",
            )

        reservations = await self.get_my_bookings()
        wanted_time = time.strip().lower()
        reservation = next(
            (
                r
                for r in reservations
                if r.station_id == station.id
                and r.date == date
                and r.time == wanted_time
            ),
            None,
        )
        if reservation is None:
            return CancelResult(
                False, f"No booking found for {station_name} on {date} at {time}"
            )
        if not reservation.cancel_params:
            return CancelResult(False, "No cancel params available for this reservation")

        logger.info(f"Cancelling {station.name} on {date} at {reservation.time}")
        response = await self._post_with_auth(reservation.cancel_params)

        # Success is either the re-rendered slot markup or an empty body.
        trimmed = response.strip()
        if not trimmed or "<" in trimmed:
            return CancelResult(True, "Booking cancelled successfully")

        logger.warning(f"Unexpected cancel response: {trimmed[:200]}")
        return CancelResult(False, f"Unexpected cancel response: {trimmed[:200]}")

    # --- Session handling ---

    async def _post_with_auth(self, form: dict[str, str]) -> str:
        """
        POST a form with the session cookies, logging in as needed.

        Raises:
            AuthenticationError: If login does not yield a session
            SessionExpiredError: If the site still asks for sign-in after a
                fresh login
            NetworkError: On transport failure or HTTP error status
        """
        max_retries = BookingConstants.MAX_SESSION_RETRIES

        for attempt in range(max_retries + 1):
            if not self._cookies:
                await self._login()

            response = await self._send(form)
            text = response.text

            if not is_session_expired(text):
                self._cookies.update(self._mirrored(self._response_cookies(response)))
                return text

            logger.warning(
                f"Session expired (attempt {attempt + 1}/{max_retries + 1})"
            )
            self._cookies.clear()

        raise SessionExpiredError("Session expired and re-authentication failed")

    async def _login(self) -> None:
        """
        Log in with the member credentials and build a fresh session.

        Raises:
            AuthenticationError: If fewer than two session cookies result
        """
        logger.info("Submitting username and password...")
        response = await self._send(
            {
                "userName": self._credentials.username,
                "password": self._credentials.password,
                "loginReturnURL": self._details.location_path,
                "formSubmitFrom": self._details.login_form_origin,
            }
        )

        cookies = self._mirrored(self._response_cookies(response))

        if len(cookies) < BookingConstants.MIN_SESSION_COOKIES:
            raise AuthenticationError("Login failed: no session cookies received")

        self._cookies = cookies
        logger.info("Login successful!")

    async def _send(self, form: dict[str, str]) -> httpx.Response:
        headers = {"Content-Type": BookingConstants.CONTENT_TYPE}
        if self._cookies:
            headers["Cookie"] = "; ".join(
                f"{name}={value}" for name, value in self._cookies.items()
            )

        request = self._http.build_request(
            "POST", self._details.location_url, data=form, headers=headers
        )
        # Session cookies live in self._cookies only, never in the client jar.
        if not self._cookies:
            request.headers.pop("Cookie", None)

        try:
            response = await self._http.send(request, follow_redirects=False)
        except httpx.RequestError as e:
            raise NetworkError(f"Request to {request.url} failed: {e}") from e
        finally:
            if self._owns_http_client:
                self._http.cookies.clear()

        if response.is_error:
            raise NetworkError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )
        return response

    def _mirrored(self, cookies: dict[str, str]) -> dict[str, str]:
        """Copy the session cookie to its mirror, as the login page script does."""
        session_cookie = cookies.get(self._details.session_cookie_name)
        if session_cookie:
            cookies[self._details.mirror_cookie_name] = session_cookie
        return cookies

    @staticmethod
    def _response_cookies(response: httpx.Response) -> dict[str, str]:
        return {cookie.name: cookie.value for cookie in response.cookies.jar}
