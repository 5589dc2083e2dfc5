"""Custom Exceptions for the JaSub application."""

from typing import Optional


class JaSubError(Exception):
    """Base class for exceptions in this module.

    ``stage`` names the pipeline stage that failed and is used to label the
    message shown to the user.
    """
    stage = "jasub"

    def __init__(self, message: str = "", stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

class ConfigurationError(JaSubError):
    """Exception raised for errors in configuration loading."""
    stage = "config"

class InputFileError(JaSubError):
    """Exception raised when the input media cannot be selected or read."""
    stage = "input"

class ModelNotFoundError(JaSubError):
    """Exception raised when the recognition model file is missing."""
    stage = "model"

class AudioExtractionError(JaSubError):
    """Exception raised for errors during audio extraction."""
    stage = "decode"

class TruncatedStreamError(AudioExtractionError):
    """Exception raised when the PCM stream ends in the middle of a sample."""

class PcmFormatError(JaSubError):
    """Exception raised when a PCM container does not match the expected format."""
    stage = "normalize"

class TranscriptionError(JaSubError):
    """Exception raised for errors during transcription."""
    stage = "recognize"

class FormattingError(JaSubError):
    """Exception raised for errors during subtitle formatting."""
    stage = "format"

class FileSystemError(JaSubError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    stage = "filesystem"
