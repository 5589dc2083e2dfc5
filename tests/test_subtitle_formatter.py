"""
Tests for the SRT formatter.
"""

import os

import pytest
from jasub.subtitle_formatter import SRTFormatter
from jasub.models import Segment, TranscriptionResult
from jasub.exceptions import FormattingError


@pytest.fixture
def formatter():
    return SRTFormatter()


@pytest.fixture
def segments():
    return [
        Segment(1, 0, 250, " こんにちは、皆さん。"),
        Segment(2, 250, 400, ""),
        Segment(3, 400, 6123, "  今日は\n  いい天気です  "),
    ]


class TestBuildDocument:

    def test_one_cue_per_segment_numbered_from_one(self, formatter, segments):
        document = formatter.build_document(segments)
        assert len(document) == 3
        assert [cue.index for cue in document.cues] == [1, 2, 3]

    def test_numbering_ignores_engine_indices(self, formatter):
        document = formatter.build_document([Segment(7, 0, 1, "a"), Segment(3, 1, 2, "b")])
        assert [cue.index for cue in document.cues] == [1, 2]

    def test_order_is_kept_even_when_out_of_order(self, formatter):
        document = formatter.build_document([
            Segment(1, 500, 600, "later"),
            Segment(2, 100, 200, "earlier"),
            Segment(3, 100, 200, "earlier"),
        ])
        assert [cue.text for cue in document.cues] == ["later", "earlier", "earlier"]

    def test_text_trimmed_but_inner_whitespace_kept(self, formatter, segments):
        document = formatter.build_document(segments)
        assert document.cues[0].text == "こんにちは、皆さん。"
        assert document.cues[2].text == "今日は\n  いい天気です"

    def test_times(self, formatter, segments):
        cue = formatter.build_document(segments).cues[2]
        assert (cue.start, cue.end) == ("00:00:04,000", "00:01:01,230")

    def test_negative_time_rejected(self, formatter):
        with pytest.raises(FormattingError):
            formatter.build_document([Segment(1, -1, 10, "x")])


class TestRender:

    def test_srt_layout(self, formatter, segments):
        text = formatter.render(formatter.build_document(segments))
        assert text == (
            "1\n00:00:00,000 --> 00:00:02,500\nこんにちは、皆さん。\n\n"
            "2\n00:00:02,500 --> 00:00:04,000\n\n\n"
            "3\n00:00:04,000 --> 00:01:01,230\n今日は\n  いい天気です\n\n"
        )

    def test_empty_document(self, formatter):
        assert formatter.render(formatter.build_document([])) == ""

    def test_formatting_is_repeatable(self, formatter, segments):
        first = formatter.render(formatter.build_document(segments))
        second = formatter.render(formatter.build_document(segments))
        assert first.encode("utf-8") == second.encode("utf-8")


class TestFormatSubtitles:

    def test_writes_utf8_file(self, formatter, segments, tmp_path):
        out = tmp_path / "clip.srt"
        document = formatter.format_subtitles(TranscriptionResult("ja", segments), str(out))
        assert out.read_bytes() == formatter.render(document).encode("utf-8")
        assert not (tmp_path / "clip.srt.part").exists()

    def test_write_failure_leaves_no_file(self, formatter, segments, tmp_path, monkeypatch):
        out = tmp_path / "clip.srt"

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(FormattingError):
            formatter.format_subtitles(TranscriptionResult("ja", segments), str(out))
        assert not out.exists()
        assert not (tmp_path / "clip.srt.part").exists()

    def test_missing_directory(self, formatter, segments, tmp_path):
        with pytest.raises(FormattingError):
            formatter.format_subtitles(
                TranscriptionResult("ja", segments), str(tmp_path / "nope" / "clip.srt")
            )
