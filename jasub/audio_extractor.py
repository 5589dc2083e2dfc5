"""Handles audio extraction from media files using ffmpeg."""

import ffmpeg
import os
import logging
import threading
from typing import List, Optional

from .exceptions import AudioExtractionError, InputFileError
from .models import PcmSpec, TARGET_PCM_SPEC
from .pcm_sink import PcmSink

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096
STDERR_TAIL_CHARS = 2000

class AudioExtractor:
    """Decodes the audio track of a media file into a 16 kHz mono WAV file."""

    def __init__(
        self,
        ffmpeg_path: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: Optional[float] = None,
        spec: PcmSpec = TARGET_PCM_SPEC
    ):
        """
        Initializes the AudioExtractor.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
            chunk_size: Number of bytes read from ffmpeg's stdout at a time.
            timeout: Seconds after which a still-running ffmpeg is killed.
                     None waits indefinitely.
            spec: Sample layout requested from ffmpeg.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.spec = spec
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def _build_stream(self, input_path: str):
        # s16le on pipe:1 carries bare samples; -loglevel error keeps ffmpeg's
        # diagnostics on stderr and short.
        return (
            ffmpeg
            .input(input_path)
            .output(
                'pipe:',
                format='s16le',
                acodec='pcm_s16le',
                ac=self.spec.channels,
                ar=self.spec.sample_rate,
                vn=None
            )
            .global_args('-loglevel', 'error')
        )

    def build_command(self, input_path: str) -> List[str]:
        """Returns the ffmpeg argument list used to decode input_path."""
        return self._build_stream(input_path).compile(cmd=self.ffmpeg_cmd)

    def extract_audio(self, input_path: str, output_wav_path: str) -> str:
        """
        Streams the decoded audio of a media file into a WAV container.

        ffmpeg's stdout is read in chunk_size pieces and written to the
        container as it arrives, so memory use does not grow with the length
        of the input.

        Args:
            input_path: Path to the input video or audio file.
            output_wav_path: Where to write the WAV container.

        Returns:
            The path of the written WAV container.

        Raises:
            InputFileError: If the input file does not exist or is not readable.
            AudioExtractionError: If ffmpeg cannot be started, exits with a
                                  nonzero status or exceeds the timeout.
            TruncatedStreamError: If the decoded stream ends with a partial sample.
        """
        logger.info(f"Starting audio extraction for: {input_path}")
        if not os.path.isfile(input_path):
            raise InputFileError(f"Input file not found or is not a file: {input_path}")
        if not os.access(input_path, os.R_OK):
            raise InputFileError(f"Input file is not readable: {input_path}")

        if os.path.exists(output_wav_path):
            logger.warning(f"Output audio file already exists, overwriting: {output_wav_path}")

        logger.debug(f"ffmpeg command: {' '.join(self.build_command(input_path))}")
        # Opened before ffmpeg starts so a bad output path never leaves a running child.
        sink = PcmSink(output_wav_path, self.spec)
        try:
            process = self._build_stream(input_path).run_async(
                cmd=self.ffmpeg_cmd, pipe_stdout=True, pipe_stderr=True
            )
        except OSError as e:
            sink.abort()
            raise AudioExtractionError(f"Could not start ffmpeg ({self.ffmpeg_cmd}): {e}") from e

        stderr_chunks: List[bytes] = []
        stderr_reader = threading.Thread(
            target=lambda: stderr_chunks.append(process.stderr.read()),
            name="ffmpeg-stderr",
            daemon=True,
        )
        stderr_reader.start()

        timed_out = threading.Event()
        def _kill() -> None:
            timed_out.set()
            process.kill()
        watchdog = threading.Timer(self.timeout, _kill) if self.timeout else None
        if watchdog:
            watchdog.daemon = True
            watchdog.start()

        try:
            while True:
                chunk = process.stdout.read(self.chunk_size)
                if not chunk:
                    break
                sink.write(chunk)
            returncode = process.wait()
        except BaseException:
            sink.abort()
            process.kill()
            process.wait()
            raise
        finally:
            if watchdog:
                watchdog.cancel()
            process.stdout.close()
            stderr_reader.join()

        stderr_output = b"".join(stderr_chunks).decode('utf-8', errors='replace').strip()
        # The watchdog may fire after a clean exit; only a failed run counts as a timeout.
        if returncode != 0 and timed_out.is_set():
            sink.abort()
            raise AudioExtractionError(f"ffmpeg did not finish within {self.timeout} seconds for {input_path}")
        if returncode != 0:
            sink.abort()
            logger.error(f"ffmpeg stderr: {stderr_output}")
            raise AudioExtractionError(
                f"ffmpeg exited with status {returncode}: {stderr_output[-STDERR_TAIL_CHARS:] or 'No stderr output'}"
            )

        sample_count = sink.finalize()
        if stderr_output:
            logger.debug(f"ffmpeg stderr: {stderr_output}")
        logger.info(f"Successfully extracted {sample_count} samples to: {output_wav_path}")
        return output_wav_path
