"""Data models for JaSub."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class PcmSpec:
    """Sample layout of a PCM stream or container."""
    channels: int = 1
    sample_rate: int = 16000
    sample_width: int = 2 # bytes, signed little-endian

TARGET_PCM_SPEC = PcmSpec()

@dataclass(frozen=True)
class Segment:
    """A time-stamped unit of recognized text.

    Times are engine ticks of 10 milliseconds. ``text`` is kept exactly as the
    engine produced it; trimming happens when cues are built.
    """
    index: int
    start_ticks: int
    end_ticks: int
    text: str

@dataclass
class TranscriptionResult:
    """Holds the structured output from the ASR process."""
    language: Optional[str]
    segments: List[Segment] = field(default_factory=list)
    original_audio_path: Optional[str] = None

@dataclass(frozen=True)
class Cue:
    """One numbered, timestamped subtitle entry."""
    index: int
    start: str
    end: str
    text: str

@dataclass(frozen=True)
class SubtitleDocument:
    """An ordered, immutable sequence of cues."""
    cues: Tuple[Cue, ...] = ()

    def __len__(self) -> int:
        return len(self.cues)

    def to_srt(self) -> str:
        return "".join(
            f"{cue.index}\n{cue.start} --> {cue.end}\n{cue.text}\n\n"
            for cue in self.cues
        )
