"""
Tests for the Whisper transcriber wrapper. The model is replaced by a fake.
"""

import numpy as np
import pytest
from jasub import transcriber as transcriber_module
from jasub.transcriber import WhisperTranscriber, seconds_to_ticks
from jasub.exceptions import ModelNotFoundError, TranscriptionError


class FakeModel:

    def __init__(self, segments, error=None):
        self.segments = segments
        self.error = error
        self.calls = []

    def transcribe(self, audio, **kwargs):
        self.calls.append((audio, kwargs))
        if self.error:
            raise self.error
        return {"language": "ja", "segments": self.segments, "text": ""}


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "model.pt"
    path.write_bytes(b"checkpoint")
    return path


@pytest.fixture
def fake_whisper(monkeypatch):
    loaded = {}

    def install(model):
        def load_model(name, device=None):
            loaded["name"] = name
            loaded["device"] = device
            return model
        monkeypatch.setattr(transcriber_module.whisper, "load_model", load_model)
        return loaded

    return install


@pytest.mark.parametrize("seconds,ticks", [
    (0.0, 0),
    (1.0, 100),
    (2.56, 256),
    (59.99, 5999),
    (3600.0, 360000),
    (-0.5, 0),
])
def test_seconds_to_ticks(seconds, ticks):
    assert seconds_to_ticks(seconds) == ticks


class TestWhisperTranscriber:

    def test_missing_model_file(self, tmp_path):
        with pytest.raises(ModelNotFoundError) as excinfo:
            WhisperTranscriber(str(tmp_path / "missing.pt"), device="cpu")
        assert excinfo.value.stage == "model"

    def test_invalid_device(self, model_file):
        with pytest.raises(ValueError):
            WhisperTranscriber(str(model_file), device="tpu")

    def test_model_is_loaded_lazily(self, model_file, fake_whisper):
        loaded = fake_whisper(FakeModel([]))
        transcriber = WhisperTranscriber(str(model_file), device="cpu")
        assert loaded == {}
        transcriber.transcribe(np.zeros(16000, dtype=np.float32))
        assert loaded == {"name": str(model_file), "device": "cpu"}

    def test_greedy_japanese_decoding(self, model_file, fake_whisper):
        model = FakeModel([])
        fake_whisper(model)
        WhisperTranscriber(str(model_file), device="cpu", fp16=True).transcribe(np.zeros(10, dtype=np.float32))
        _, options = model.calls[0]
        assert options["language"] == "ja"
        assert options["temperature"] == 0.0
        assert options["best_of"] == 1
        assert options["beam_size"] is None
        assert options["fp16"] is False
        assert options["verbose"] is True

    def test_segments_converted_to_ticks_in_order(self, model_file, fake_whisper):
        fake_whisper(FakeModel([
            {"id": 0, "start": 0.0, "end": 2.5, "text": " こんにちは"},
            {"id": 1, "start": 2.5, "end": 4.0, "text": ""},
            {"id": 2, "start": 1.0, "end": 2.0, "text": "前"},
        ]))
        result = WhisperTranscriber(str(model_file), device="cpu").transcribe(np.zeros(10, dtype=np.float32))
        assert result.language == "ja"
        assert [(s.index, s.start_ticks, s.end_ticks, s.text) for s in result.segments] == [
            (1, 0, 250, " こんにちは"),
            (2, 250, 400, ""),
            (3, 100, 200, "前"),
        ]

    def test_empty_samples_skip_the_model(self, model_file, fake_whisper):
        model = FakeModel([])
        loaded = fake_whisper(model)
        result = WhisperTranscriber(str(model_file), device="cpu").transcribe(np.zeros(0, dtype=np.float32))
        assert result.segments == []
        assert loaded == {}

    def test_engine_failure_wrapped(self, model_file, fake_whisper):
        fake_whisper(FakeModel([], error=RuntimeError("out of memory")))
        with pytest.raises(TranscriptionError) as excinfo:
            WhisperTranscriber(str(model_file), device="cpu").transcribe(np.zeros(10, dtype=np.float32))
        assert excinfo.value.stage == "recognize"

    def test_malformed_segment(self, model_file, fake_whisper):
        fake_whisper(FakeModel([{"start": 0.0, "text": "no end"}]))
        with pytest.raises(TranscriptionError):
            WhisperTranscriber(str(model_file), device="cpu").transcribe(np.zeros(10, dtype=np.float32))
