"""Tests for line classification across transcript dialects."""

from __future__ import annotations

import pytest

from src.ingestion.dialects import (
    is_metadata,
    match_glued,
    match_labelled,
    match_line,
    match_spaced,
    normalize_speaker,
)
from src.ingestion.models import Continuation, Dialect, NewSegment


class TestSpacedDialect:
    def test_basic_line(self) -> None:
        result = match_spaced("Alice 3:30 hello there")
        assert result == NewSegment("Alice", "3:30", "hello there", Dialect.SPACED)

    def test_parenthesised_timestamp_with_colon(self) -> None:
        result = match_spaced("Lenny (00:00:36): Welcome back.")
        assert result is not None
        assert result.speaker == "Lenny"
        assert result.timestamp == "00:00:36"
        assert result.lead_text == "Welcome back."

    def test_bracketed_timestamp(self) -> None:
        result = match_spaced("Interviewer [12:05] Shall we begin?")
        assert result is not None
        assert result.speaker == "Interviewer"
        assert result.timestamp == "12:05"
        assert result.lead_text == "Shall we begin?"

    def test_hour_timestamp(self) -> None:
        result = match_spaced("Bob 1:02:03 hi")
        assert result is not None
        assert result.timestamp == "1:02:03"
        assert result.lead_text == "hi"

    def test_comma_separators(self) -> None:
        result = match_spaced("Alice, 3:30, hi")
        assert result is not None
        assert result.speaker == "Alice"
        assert result.lead_text == "hi"

    def test_colon_between_speaker_and_timestamp(self) -> None:
        result = match_spaced("Alice:3:30 hi")
        assert result is not None
        assert result.speaker == "Alice"
        assert result.timestamp == "3:30"

    def test_keeps_parenthetical_in_utterance(self) -> None:
        result = match_spaced("Alice 3:30 (laughs) let's start.")
        assert result is not None
        assert result.lead_text == "(laughs) let's start."

    def test_header_without_text(self) -> None:
        result = match_spaced("Guest (00:01:02):")
        assert result is not None
        assert result.speaker == "Guest"
        assert result.lead_text == ""

    def test_multi_word_speaker(self) -> None:
        result = match_spaced("Speaker 2 3:30 hi")
        assert result is not None
        assert result.speaker == "Speaker 2"

    def test_rejects_glued_text(self) -> None:
        assert match_spaced("나리 3:30예.네 감사합니다.") is None

    def test_rejects_digit_speaker(self) -> None:
        assert match_spaced("3:30 hello") is None


class TestGluedDialect:
    def test_korean_chat_line(self) -> None:
        result = match_glued("나리 3:30예.네 감사합니다.")
        assert result == NewSegment("나리", "3:30", "예.네 감사합니다.", Dialect.GLUED)

    def test_short_latin_utterance(self) -> None:
        result = match_glued("준석 3:45M.My.")
        assert result is not None
        assert result.speaker == "준석"
        assert result.timestamp == "3:45"
        assert result.lead_text == "M.My."

    def test_speaker_stops_at_first_timestamp(self) -> None:
        result = match_glued("나리 3:30예 at 4:00 we met")
        assert result is not None
        assert result.speaker == "나리"
        assert result.lead_text == "예 at 4:00 we met"


class TestDialectPrecedence:
    @pytest.mark.parametrize(
        "line",
        [
            "나리 3:30예.네 감사합니다. 저희 회사는 지금 23 년도에",
            "준석 3:45M.My.",
            "나리 3:54연간 볼륨이 아직은 그렇게 크진 않아요.",
        ],
    )
    def test_glued_lines_fall_through_to_glued(self, line: str) -> None:
        result = match_line(line)
        assert isinstance(result, NewSegment)
        assert result.dialect is Dialect.GLUED

    def test_spaced_wins_when_both_match(self) -> None:
        line = "Alice (3:30) - hi"
        # The glued matcher on its own would leave the delimiter in the text.
        glued = match_glued(line)
        assert glued is not None
        assert glued.lead_text == "- hi"

        result = match_line(line)
        assert isinstance(result, NewSegment)
        assert result.dialect is Dialect.SPACED
        assert result.lead_text == "hi"

    def test_seconds_not_mistaken_for_delimiter(self) -> None:
        result = match_line("준석 3:45:12M.My.")
        assert isinstance(result, NewSegment)
        assert result.dialect is Dialect.GLUED
        assert result.timestamp == "3:45:12"
        assert result.lead_text == "M.My."

    def test_same_split_for_plain_spaced_line(self) -> None:
        spaced = match_spaced("Alice 3:30 hello")
        glued = match_glued("Alice 3:30 hello")
        assert spaced is not None and glued is not None
        assert (spaced.speaker, spaced.timestamp, spaced.lead_text) == (
            glued.speaker,
            glued.timestamp,
            glued.lead_text,
        )


class TestLabelledDialect:
    def test_basic_label(self) -> None:
        result = match_labelled("Speaker 1: Hello")
        assert result == NewSegment("Speaker 1", "", "Hello", Dialect.LABELLED)

    def test_long_label_rejected(self) -> None:
        assert match_labelled("This is a rather long sentence: with a colon") is None

    def test_url_is_not_a_label(self) -> None:
        assert match_labelled("https://example.com/recording") is None

    def test_only_while_no_timed_segment_is_open(self) -> None:
        assert isinstance(match_line("Note: remember this"), NewSegment)
        assert isinstance(match_line("Note: remember this", Dialect.HEADERLESS), NewSegment)
        assert isinstance(match_line("Note: remember this", Dialect.LABELLED), NewSegment)
        assert match_line("Note: remember this", Dialect.SPACED) == Continuation("Note: remember this")
        assert match_line("Note: remember this", Dialect.GLUED) == Continuation("Note: remember this")


class TestMetadata:
    @pytest.mark.parametrize(
        "line",
        [
            "2026년 1월 15일 오후 3:00",
            "24.01.15 인터뷰",
            "31분 43초",
            "1시간 2분",
            "7:03",
            "녹음녹화 인터뷰_0115",
            "Recording 3:30 started",
        ],
    )
    def test_metadata_lines(self, line: str) -> None:
        assert is_metadata(line)
        assert match_line(line) == Continuation(line)

    def test_speaker_line_is_not_metadata(self) -> None:
        assert not is_metadata("Alice 3:30 hello")


class TestMatchLine:
    def test_plain_text_is_continuation(self) -> None:
        assert match_line("  just some plain notes  ") == Continuation("just some plain notes")

    def test_korean_role_label_collapsed(self) -> None:
        result = match_line("화자 1 00:15 안녕하세요")
        assert isinstance(result, NewSegment)
        assert result.speaker == "화자1"
        assert result.timestamp == "00:15"
        assert result.lead_text == "안녕하세요"


class TestNormalizeSpeaker:
    def test_strips_trailing_delimiters(self) -> None:
        assert normalize_speaker(" Alice ( ") == "Alice"

    def test_role_label(self) -> None:
        assert normalize_speaker("참여자 12") == "참여자12"

    def test_other_names_untouched(self) -> None:
        assert normalize_speaker("Speaker 1") == "Speaker 1"
