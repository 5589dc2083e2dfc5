"""Orchestrates the subtitle generation pipeline."""

import logging
import os
import time
from typing import Optional, Tuple

from .audio_extractor import AudioExtractor
from .sample_normalizer import SampleNormalizer
from .transcriber import Transcriber
from .subtitle_formatter import SubtitleFormatter, SRTFormatter
from .models import TranscriptionResult
from .exceptions import JaSubError, InputFileError, FileSystemError
from .utils import ensure_dir_exists, remove_file

logger = logging.getLogger(__name__)

class SubtitleGenerator:
    """
    Manages the end-to-end process of generating Japanese subtitles for a media file.

    Stages run strictly in order: decode, normalize, recognize, format. A
    failing stage stops the run; no subtitle file is written and the
    intermediate WAV file is kept for inspection. It is removed only after
    the subtitle file has been written.
    """

    def __init__(
        self,
        config: dict,
        audio_extractor: AudioExtractor,
        normalizer: SampleNormalizer,
        transcriber: Transcriber,
        subtitle_formatter: Optional[SubtitleFormatter] = None
    ):
        """
        Initializes the SubtitleGenerator.

        Args:
            config: A dictionary containing configuration settings.
            audio_extractor: Decodes input media into the intermediate WAV file.
            normalizer: Loads the WAV file as float samples.
            transcriber: Produces segments from the samples.
            subtitle_formatter: Writes the subtitle file. Defaults to SRTFormatter.
        """
        self.config = config
        self.audio_extractor = audio_extractor
        self.normalizer = normalizer
        self.transcriber = transcriber
        self.subtitle_formatter = subtitle_formatter or SRTFormatter()

        self.temp_dir = config.get('temp_dir')
        if not self.temp_dir:
            raise JaSubError("Configuration missing 'temp_dir'.", stage="config")

    def _get_output_paths(self, input_path: str, output_dir: str) -> Tuple[str, str]:
        """Determines the subtitle path and the intermediate WAV path."""
        base_name = os.path.splitext(os.path.basename(input_path))[0]
        subtitle_path = os.path.join(output_dir, f"{base_name}.srt")
        temp_audio_path = os.path.join(self.temp_dir, f"{base_name}_{int(time.time())}.wav")
        return subtitle_path, temp_audio_path

    def generate(self, input_path: str, output_dir: str = ".") -> str:
        """
        Executes the full subtitle generation pipeline for a single file.

        Args:
            input_path: Path to the input video or audio file.
            output_dir: Directory to save the subtitle file.

        Returns:
            Path of the written subtitle file.

        Raises:
            JaSubError: For any failure; ``stage`` names the failing step.
        """
        start_time = time.time()
        logger.info(f"--- Starting JaSub process for: {input_path} ---")
        if not os.path.isfile(input_path):
            raise InputFileError(f"Input file not found or is not a file: {input_path}")
        ensure_dir_exists(output_dir)
        ensure_dir_exists(self.temp_dir)

        subtitle_path, temp_audio_path = self._get_output_paths(input_path, output_dir)

        try:
            logger.info("Step 1/4: Extracting audio...")
            wav_path = self._run_stage(
                "decode", self.audio_extractor.extract_audio, input_path, temp_audio_path
            )

            logger.info("Step 2/4: Loading audio samples...")
            samples = self._run_stage("normalize", self.normalizer.load, wav_path)

            logger.info("Step 3/4: Transcribing audio (Japanese)...")
            result: TranscriptionResult = self._run_stage("recognize", self.transcriber.transcribe, samples)
            del samples
            if not result.segments:
                logger.warning("Transcription produced no segments. Writing an empty subtitle file.")
            else:
                logger.info(f"Transcription complete. Found {len(result.segments)} segments.")
            result.original_audio_path = wav_path

            logger.info("Step 4/4: Writing subtitles (SRT)...")
            self._run_stage("format", self.subtitle_formatter.format_subtitles, result, subtitle_path)
        except JaSubError as e:
            logger.error(f"JaSub process failed at stage '{e.stage}': {e}")
            if os.path.exists(temp_audio_path):
                logger.info(f"Keeping intermediate audio for inspection: {temp_audio_path}")
            raise

        if remove_file(temp_audio_path):
            logger.info(f"Cleaned up temporary file: {temp_audio_path}")

        logger.info(f"--- JaSub process completed successfully in {time.time() - start_time:.2f} seconds ---")
        return subtitle_path

    @staticmethod
    def _run_stage(stage: str, func, *args):
        try:
            return func(*args)
        except JaSubError:
            raise
        except OSError as e:
            logger.error(f"Stage '{stage}' failed: {e}", exc_info=True)
            raise FileSystemError(f"{type(e).__name__}: {e}", stage=stage) from e
        except Exception as e:
            logger.critical(f"An unexpected error occurred during stage '{stage}': {e}", exc_info=True)
            raise JaSubError(f"An unexpected error occurred: {e}", stage=stage) from e
