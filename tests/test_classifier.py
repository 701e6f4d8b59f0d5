"""Tests for response classification (no HTTP required)."""

import pytest

from mx3booker.classifier import (
    classify_booking_response,
    classify_slot_status,
    is_session_expired,
)
from mx3booker.models import (
    BookingErrorKind,
    BookingFailure,
    BookingSuccess,
    SlotStatus,
)


class TestClassifySlotStatus:
    """Slot status rules, title rules before class rules."""

    @pytest.mark.parametrize(
        "title, classes, expected",
        [
            ("Reservation window closed", ["button-link"], SlotStatus.WINDOW_CLOSED),
            (
                "Reserved for recurring appointment.",
                ["button-link", "reserved"],
                SlotStatus.RECURRING,
            ),
            ("Reserved by J. Smith", ["button-link", "reserved"], SlotStatus.RESERVED),
            ("Click to reserve", ["button-link"], SlotStatus.AVAILABLE),
            ("", ["button-link"], SlotStatus.AVAILABLE),
            ("", ["button-link", "reserved"], SlotStatus.RESERVED),
            ("", ["button-link", "gray"], SlotStatus.WINDOW_CLOSED),
            ("", [], SlotStatus.AVAILABLE),
        ],
    )
    def test_rule_chain(self, title, classes, expected):
        assert classify_slot_status(title, classes) == expected

    def test_title_beats_conflicting_classes(self):
        """Test that a title rule wins over contradicting class tokens."""
        assert (
            classify_slot_status("Click to reserve", ["reserved", "gray"])
            == SlotStatus.AVAILABLE
        )
        assert (
            classify_slot_status("Reservation window closed", ["reserved"])
            == SlotStatus.WINDOW_CLOSED
        )
        assert (
            classify_slot_status("Reserved by someone", ["gray"])
            == SlotStatus.RESERVED
        )

    def test_reserved_class_checked_before_gray(self):
        assert classify_slot_status("", ["gray", "reserved"]) == SlotStatus.RESERVED

    def test_class_tokens_match_whole_words(self):
        assert classify_slot_status("", ["unreserved"]) == SlotStatus.AVAILABLE


class TestClassifyBookingResponse:
    """Booking response vocabulary."""

    @pytest.mark.parametrize(
        "text, kind",
        [
            ("reload", BookingErrorKind.NO_CREDITS),
            ("duplicate", BookingErrorKind.DUPLICATE),
            ("concurrent", BookingErrorKind.CONCURRENT),
            ("invalid", BookingErrorKind.INVALID),
            ("  duplicate\n", BookingErrorKind.DUPLICATE),
        ],
    )
    def test_status_words_are_failures(self, text, kind):
        result = classify_booking_response(text)
        assert isinstance(result, BookingFailure)
        assert result.success is False
        assert result.error == kind

    def test_markup_is_success(self):
        html = '<p id="res_time_140_2026-02-10_5:00am"><a class="button-link reserved">5:00am</a></p>'
        result = classify_booking_response(html)
        assert isinstance(result, BookingSuccess)
        assert result.success is True

    def test_unknown_text_is_success(self):
        assert classify_booking_response("ok").success is True

    def test_status_word_inside_text_is_success(self):
        assert classify_booking_response("duplicate entry").success is True

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_empty_response_is_failure(self, text):
        result = classify_booking_response(text)
        assert result.success is False
        assert result.error == BookingErrorKind.INVALID
        assert "Empty response" in result.message


class TestIsSessionExpired:
    def test_detects_sign_in_page(self):
        assert is_session_expired("<h1>Sign In Required</h1>") is True

    def test_normal_content(self):
        assert is_session_expired("<div>Normal page</div>") is False

    def test_phrase_is_case_sensitive(self):
        assert is_session_expired("sign in required") is False
