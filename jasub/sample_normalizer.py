"""Loads a PCM container into the float sample buffer the recognizer expects."""

import logging
import wave

import numpy as np

from .exceptions import PcmFormatError
from .models import PcmSpec, TARGET_PCM_SPEC

logger = logging.getLogger(__name__)

# int16 full scale. Dividing by 32768 (not 32767) maps -32768 to exactly -1.0
# and 32767 to 0.999969..., never 1.0.
INT16_SCALE = 32768.0

def normalize_pcm(raw: bytes) -> np.ndarray:
    """Converts signed 16-bit little-endian PCM bytes to float32 in [-1.0, 1.0)."""
    if len(raw) % 2:
        raise PcmFormatError(f"PCM data has an odd length ({len(raw)} bytes)")
    samples = np.frombuffer(raw, dtype="<i2")
    return samples.astype(np.float32) / np.float32(INT16_SCALE)

class SampleNormalizer:
    """Reads a finalized WAV container and checks it against the target format."""

    def __init__(self, spec: PcmSpec = TARGET_PCM_SPEC):
        self.spec = spec

    def load(self, wav_path: str) -> np.ndarray:
        """
        Reads every sample from the container in order.

        Args:
            wav_path: Path to a mono 16 kHz 16-bit WAV file.

        Returns:
            A float32 array with one element per sample recorded in the header.

        Raises:
            PcmFormatError: If the file is not a readable WAV container, its
                            declared format differs from the expected layout, or
                            it holds fewer samples than its header claims.
        """
        logger.info(f"Loading PCM samples from: {wav_path}")
        try:
            with wave.open(wav_path, "rb") as wav_file:
                self._check_format(wav_path, wav_file)
                frame_count = wav_file.getnframes()
                raw = wav_file.readframes(frame_count)
        except (wave.Error, EOFError) as e:
            raise PcmFormatError(f"Invalid PCM container {wav_path}: {e}") from e
        except OSError as e:
            raise PcmFormatError(f"Could not read PCM container {wav_path}: {e}") from e

        samples = normalize_pcm(raw)
        if samples.size != frame_count:
            raise PcmFormatError(
                f"PCM container {wav_path} declares {frame_count} samples but holds {samples.size}"
            )
        duration = frame_count / self.spec.sample_rate
        logger.info(f"Loaded {frame_count} samples ({duration:.2f}s of audio)")
        return samples

    def _check_format(self, wav_path: str, wav_file: wave.Wave_read) -> None:
        actual = PcmSpec(
            channels=wav_file.getnchannels(),
            sample_rate=wav_file.getframerate(),
            sample_width=wav_file.getsampwidth(),
        )
        if actual != self.spec:
            raise PcmFormatError(
                f"PCM container {wav_path} has {actual.channels} ch / {actual.sample_rate} Hz / "
                f"{actual.sample_width * 8}-bit, expected {self.spec.channels} ch / "
                f"{self.spec.sample_rate} Hz / {self.spec.sample_width * 8}-bit"
            )
