"""Tests using VCR to record/replay real HTTP interactions with the booking site."""

from pathlib import Path

import pytest
import vcr

from mx3booker.client import MX3Client
from mx3booker.config import LoginDetails
from mx3booker.exceptions import ConfigurationError
from mx3booker.models import Credentials

CASSETTES = Path(__file__).parent / "cassettes"

# Login bodies are matched with userName and password filtered out.
REPLAY_CREDENTIALS = Credentials(username="replay@example.com", password="replay")

# VCR configuration
vcr_config = vcr.VCR(
    cassette_library_dir=str(CASSETTES),
    record_mode="once",  # Record once, then replay
    match_on=["method", "scheme", "host", "port", "path", "body"],
    filter_headers=["cookie", "user-agent"],
    filter_post_data_parameters=["userName", "password"],
    decode_compressed_response=True,
)


def live_client() -> MX3Client:
    try:
        credentials = LoginDetails().credentials()
    except ConfigurationError:
        pytest.skip("Real credentials not available for recording")
    return MX3Client(credentials)


def require_cassette(name: str) -> None:
    if not (CASSETTES / name).exists():
        pytest.skip(f"{name} not found. Run: pytest -m live")


class TestWithVCRRecordings:
    """Record with real credentials via ``pytest -m live``, replay offline."""

    @pytest.mark.live
    @pytest.mark.asyncio
    async def test_record_schedule_and_credits(self):
        with vcr_config.use_cassette("schedule_and_credits.yaml"):
            async with live_client() as client:
                schedule = await client.get_schedule()
                credits = await client.get_credits()

        assert isinstance(credits, int)
        assert all(slot.date == schedule.date for slot in schedule.slots)

    @pytest.mark.live
    @pytest.mark.asyncio
    async def test_record_my_bookings(self):
        with vcr_config.use_cassette("my_bookings.yaml"):
            async with live_client() as client:
                reservations = await client.get_my_bookings()

        for reservation in reservations:
            assert reservation.cancel_params["unreserve"].isdigit()

    @pytest.mark.asyncio
    async def test_replay_my_bookings(self):
        """Replay the recorded login and reservations page."""
        require_cassette("my_bookings.yaml")

        with vcr_config.use_cassette("my_bookings.yaml", allow_playback_repeats=True):
            async with MX3Client(REPLAY_CREDENTIALS) as client:
                reservations = await client.get_my_bookings()

        assert all(r.station_name for r in reservations)
