"""Writes a raw PCM byte stream into a WAV container as it arrives."""

import logging
import wave
from typing import Optional

from .exceptions import FileSystemError, PcmFormatError, TruncatedStreamError
from .models import PcmSpec, TARGET_PCM_SPEC

logger = logging.getLogger(__name__)

class PcmSink:
    """
    Consumes raw little-endian PCM bytes in chunks of any size and stores the
    samples in a WAV file declared with a fixed header.

    Only whole samples are written. A chunk that ends halfway through a
    sample leaves the odd byte pending until the next chunk completes it.
    If the stream ends with a byte still pending, finalize() raises
    TruncatedStreamError instead of dropping or padding it.

    Usage:
        with PcmSink("temp_audio.wav") as sink:
            for chunk in chunks:
                sink.write(chunk)
        # leaving the block calls finalize()
    """

    def __init__(self, output_path: str, spec: PcmSpec = TARGET_PCM_SPEC):
        self.output_path = output_path
        self.spec = spec
        self._frame_size = spec.channels * spec.sample_width
        self._pending = b""
        self._samples_written = 0
        self._closed = False
        try:
            self._wav = wave.open(output_path, "wb")
        except OSError as e:
            raise FileSystemError(f"Could not create PCM container {output_path}: {e}", stage="decode") from e
        self._wav.setnchannels(spec.channels)
        self._wav.setsampwidth(spec.sample_width)
        self._wav.setframerate(spec.sample_rate)
        logger.debug(
            f"Opened PCM container {output_path} "
            f"({spec.channels} ch, {spec.sample_rate} Hz, {spec.sample_width * 8}-bit)"
        )

    @property
    def samples_written(self) -> int:
        return self._samples_written

    @property
    def pending_bytes(self) -> int:
        return len(self._pending)

    def write(self, chunk: bytes) -> int:
        """
        Appends a chunk of raw PCM bytes.

        Returns:
            Number of whole samples written by this call.
        """
        if self._closed:
            raise PcmFormatError(f"PCM container {self.output_path} is already finalized", stage="decode")
        if not chunk:
            return 0

        data = self._pending + chunk if self._pending else chunk
        usable = len(data) - (len(data) % self._frame_size)
        self._pending = bytes(data[usable:])
        if usable:
            self._wav.writeframesraw(data[:usable])
            frames = usable // self._frame_size
            self._samples_written += frames
            return frames
        return 0

    def finalize(self) -> int:
        """
        Closes the container so its header records the final sample count.

        Returns:
            Total number of samples stored.

        Raises:
            TruncatedStreamError: If the stream ended in the middle of a sample.
        """
        if self._closed:
            return self._samples_written
        self._close()
        if self._pending:
            raise TruncatedStreamError(
                f"PCM stream ended with {len(self._pending)} trailing byte(s) after "
                f"{self._samples_written} samples; expected a multiple of {self._frame_size}"
            )
        logger.info(f"PCM container finalized: {self._samples_written} samples -> {self.output_path}")
        return self._samples_written

    def abort(self) -> None:
        """Closes the container without checking for a truncated tail."""
        if not self._closed:
            self._close()

    def _close(self) -> None:
        self._closed = True
        self._wav.close()

    def __enter__(self) -> "PcmSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        if exc_type is None:
            self.finalize()
        else:
            self.abort()
        return None
