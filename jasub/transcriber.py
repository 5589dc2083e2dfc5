"""Handles Speech-to-Text transcription using Whisper."""

import whisper
import logging
import torch
from abc import ABC, abstractmethod
from typing import Optional
import os

import numpy as np

from .models import TranscriptionResult, Segment
from .exceptions import ModelNotFoundError, TranscriptionError

logger = logging.getLogger(__name__)

TICKS_PER_SECOND = 100 # one tick is 10 ms

def seconds_to_ticks(seconds: float) -> int:
    """Converts a Whisper timestamp in seconds to 10 ms ticks."""
    return max(0, int(round(float(seconds) * TICKS_PER_SECOND)))

class Transcriber(ABC):
    """Abstract base class for transcription services."""

    @abstractmethod
    def transcribe(self, samples: np.ndarray) -> TranscriptionResult:
        """
        Transcribes a buffer of normalized samples.

        Args:
            samples: Mono 16 kHz float32 samples in [-1.0, 1.0].

        Returns:
            A TranscriptionResult whose segments are in emission order.

        Raises:
            TranscriptionError: If transcription fails.
        """
        pass

class WhisperTranscriber(Transcriber):
    """Implements Japanese transcription using OpenAI's Whisper model."""

    def __init__(
        self,
        model_path: str,
        device: str = "cuda",
        fp16: bool = True,
        language: str = "ja",
        verbose: Optional[bool] = True
    ):
        """
        Initializes the WhisperTranscriber.

        The model file is checked here, before any audio is decoded, but it is
        only loaded on the first call to transcribe().

        Args:
            model_path: Path to a Whisper checkpoint file.
            device: The device to run the model on ("cuda" or "cpu").
            fp16: Whether to use float16 precision (faster on compatible GPUs).
            language: Language code passed to the decoder.
            verbose: Whisper's console output. True prints each segment with
                     its timestamps, False shows a progress bar, None is silent.

        Raises:
            ModelNotFoundError: If model_path does not point to a file.
            ValueError: If the specified device is invalid.
        """
        if not model_path or not os.path.isfile(model_path):
            raise ModelNotFoundError(f"Whisper model file not found: {model_path}")

        self.model_path = model_path
        self.device = device
        self.language = language
        self.verbose = verbose

        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
             raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")
        self.fp16 = fp16 and self.device == "cuda" # FP16 only works on CUDA

        self.model = None
        logger.info(f"WhisperTranscriber configured with model '{self.model_path}' on device '{self.device}' (FP16: {self.fp16})")

    def _load_model(self):
        if self.model is None:
            logger.info(f"Loading Whisper model from {self.model_path}...")
            try:
                self.model = whisper.load_model(self.model_path, device=self.device)
            except Exception as e:
                logger.error(f"Failed to load Whisper model '{self.model_path}': {e}", exc_info=True)
                raise TranscriptionError(f"Failed to load Whisper model '{self.model_path}': {e}") from e
            logger.info("Whisper model loaded successfully.")
        return self.model

    def decode_options(self) -> dict:
        """Options passed to whisper's transcribe: greedy, single candidate, fixed language."""
        return {
            "language": self.language,
            "task": "transcribe",
            "temperature": 0.0,
            "best_of": 1,
            "beam_size": None,
            "fp16": self.fp16,
            "verbose": self.verbose,
        }

    def transcribe(self, samples: np.ndarray) -> TranscriptionResult:
        """
        Transcribes the sample buffer with the Whisper model.

        Args:
            samples: The whole normalized audio as a float32 array.

        Returns:
            A TranscriptionResult with tick-based segments numbered from 1.

        Raises:
            TranscriptionError: If the model fails to load or to transcribe.
        """
        logger.info(f"Starting transcription of {len(samples)} samples (language: {self.language})")
        if len(samples) == 0:
            logger.warning("No audio samples to transcribe.")
            return TranscriptionResult(language=self.language, segments=[])

        model = self._load_model()
        try:
            result = model.transcribe(np.asarray(samples, dtype=np.float32), **self.decode_options())
        except Exception as e:
            logger.error(f"Error during Whisper transcription: {e}", exc_info=True)
            raise TranscriptionError(f"Whisper transcription failed: {e}") from e

        segments = []
        for seg_data in result.get('segments', []):
            try:
                segment = Segment(
                    index=len(segments) + 1,
                    start_ticks=seconds_to_ticks(seg_data['start']),
                    end_ticks=seconds_to_ticks(seg_data['end']),
                    text=seg_data['text']
                )
            except (KeyError, TypeError, ValueError) as e:
                raise TranscriptionError(f"Malformed segment from Whisper: {seg_data!r}") from e
            segments.append(segment)

        logger.info(f"Transcription completed. Processed {len(segments)} segments.")
        return TranscriptionResult(language=result.get('language', self.language), segments=segments)
