"""Command-Line Interface handler for JaSub."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config_loader import ConfigLoader
from .log_setup import setup_logging
from .audio_extractor import AudioExtractor
from .sample_normalizer import SampleNormalizer
from .transcriber import WhisperTranscriber
from .subtitle_generator import SubtitleGenerator
from .file_picker import pick_input_file
from .exceptions import JaSubError, InputFileError

logger = logging.getLogger(__name__) # Get logger for this module

class CLIHandler:
    """Parses arguments and orchestrates the JaSub process."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="JaSub: Generate Japanese subtitles (.srt) for a local video or audio file.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-i", "--input",
            default=None,
            help="Path to the input video/audio file. Opens a file dialog when omitted."
        )
        parser.add_argument(
            "-o", "--output-dir",
            default=".",
            help="Directory to save the generated subtitle file."
        )
        parser.add_argument(
            "-c", "--config",
            default="config.yaml",
            help="Path to the configuration YAML file."
        )
        parser.add_argument(
            "--model",
            default=None, # Default taken from config
            help="Override the Whisper model file specified in config."
        )
        parser.add_argument(
            "--temp-dir",
            default=None,
            help="Override the directory for the intermediate WAV file."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "--device",
            default=None,
            choices=["cuda", "cpu"],
            help="Override the processing device (cuda or cpu) specified in config."
        )
        return parser

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Parses arguments, selects the input, loads config, and runs the generator."""
        args = self.parser.parse_args(argv)

        # --- Select Input ---
        # Happens before logging is set up so a cancelled dialog leaves nothing behind.
        input_path = args.input
        if input_path is None:
            print("Select the video or audio file to process...")
            try:
                input_path = pick_input_file()
            except JaSubError as e:
                print(f"[{e.stage}] {e}", file=sys.stderr)
                sys.exit(1)
            if input_path is None:
                print("File selection cancelled. Nothing to do.")
                sys.exit(0)
        print(f"Selected file: {input_path}")

        log_level = getattr(logging, args.log_level.upper(), logging.INFO)

        try:
            config = ConfigLoader().load_config(args.config)
        except JaSubError as e:
            setup_logging(log_level=log_level)
            logger.critical(f"Failed to load configuration from {args.config}: {e}")
            print(f"[{e.stage}] {e}", file=sys.stderr)
            sys.exit(1)

        setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])

        # --- Apply CLI Overrides ---
        if args.model:
            logger.info(f"Overriding model_path from config with CLI argument: {args.model}")
            config['model_path'] = args.model
        if args.temp_dir:
            logger.info(f"Overriding temp_dir from config with CLI argument: {args.temp_dir}")
            config['temp_dir'] = args.temp_dir
        if args.device:
            logger.info(f"Overriding device from config with CLI argument: {args.device}")
            config['device'] = args.device

        try:
            # Preconditions are checked before any heavy work starts.
            if not os.path.isfile(input_path) or not os.access(input_path, os.R_OK):
                raise InputFileError(f"Input file not found or not readable: {input_path}")

            logger.info("Initializing JaSub components...")
            transcriber = WhisperTranscriber(
                model_path=config['model_path'],
                device=config['device'],
                fp16=config['whisper_fp16'],
                language=config['language'],
                verbose=config['whisper_verbose']
            )
            audio_extractor = AudioExtractor(
                ffmpeg_path=config['ffmpeg_path'],
                chunk_size=config['read_chunk_size'],
                timeout=config['decode_timeout_seconds']
            )
            generator = SubtitleGenerator(
                config=config,
                audio_extractor=audio_extractor,
                normalizer=SampleNormalizer(),
                transcriber=transcriber
            )
            logger.info("Components initialized successfully.")

            subtitle_path = generator.generate(input_path, args.output_dir)
            logger.info("JaSub finished successfully.")
            print(f"Subtitles written to: {subtitle_path}")
            sys.exit(0)

        except JaSubError as e:
            logger.error(f"A JaSub error occurred: {e}")
            print(f"[{e.stage}] {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2) # Use a different exit code for unexpected crashes


def main() -> None:
    """Console script entry point."""
    CLIHandler().run()
