"""Handles formatting transcription results into subtitle files (SRT)."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable

from .models import Cue, Segment, SubtitleDocument, TranscriptionResult
from .exceptions import FormattingError
from .utils import format_time_srt, remove_file

logger = logging.getLogger(__name__)

class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    @abstractmethod
    def build_document(self, segments: Iterable[Segment]) -> SubtitleDocument:
        """Converts recognizer segments into subtitle cues."""
        pass

    @abstractmethod
    def render(self, document: SubtitleDocument) -> str:
        """Renders a document in the formatter's text format."""
        pass

    def format_subtitles(self, transcription_result: TranscriptionResult, output_path: str) -> SubtitleDocument:
        """
        Formats the transcription result into a subtitle file.

        The text is written to a temporary sibling file first and moved into
        place once complete, so a failed write never leaves a partial file at
        output_path.

        Args:
            transcription_result: The result from the transcription process.
            output_path: The path to save the formatted subtitle file.

        Returns:
            The document that was written.

        Raises:
            FormattingError: If formatting or writing fails.
        """
        logger.info(f"Formatting subtitles to: {output_path}")
        document = self.build_document(transcription_result.segments)
        content = self.render(document)

        part_path = f"{output_path}.part"
        try:
            with open(part_path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(content)
            os.replace(part_path, output_path)
        except OSError as e:
            logger.error(f"Failed to write subtitle file to {output_path}: {e}", exc_info=True)
            remove_file(part_path)
            raise FormattingError(f"Could not write subtitle file {output_path}: {e}") from e

        logger.info(f"Successfully wrote {len(document)} subtitle blocks to {output_path}")
        return document


class SRTFormatter(SubtitleFormatter):
    """
    Formats subtitles into the SRT (SubRip Text) format.

    One cue is produced per segment, in the order received. Segments are not
    sorted, merged or deduplicated, and a segment with empty text still gets
    a cue (with an empty text line) so cue numbers match segment positions.

        1
        00:00:01,200 --> 00:00:04,800
        こんにちは

    """

    def build_document(self, segments: Iterable[Segment]) -> SubtitleDocument:
        cues = []
        for position, segment in enumerate(segments, start=1):
            try:
                start = format_time_srt(segment.start_ticks)
                end = format_time_srt(segment.end_ticks)
            except ValueError as e:
                raise FormattingError(f"Segment {position} has an invalid time: {e}") from e
            if segment.end_ticks < segment.start_ticks:
                logger.warning(f"Segment {position} ends before it starts ({start} -> {end}).")
            cues.append(Cue(index=position, start=start, end=end, text=segment.text.strip()))
        return SubtitleDocument(cues=tuple(cues))

    def render(self, document: SubtitleDocument) -> str:
        return document.to_srt()
