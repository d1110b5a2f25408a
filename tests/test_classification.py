from __future__ import annotations

from pathlib import Path

import pytest

from adjust_volume.audio_contract import LOSSY_CODECS, SUPPORTED_EXTENSIONS
from adjust_volume.classification import classify
from adjust_volume.domain.errors import ClassificationError, UnsupportedFile
from adjust_volume.domain.models import CodecClass


def _classify(path: Path, engine, probe_codec: bool = True):
    return classify(
        path,
        supported_extensions=SUPPORTED_EXTENSIONS,
        lossy_codecs=LOSSY_CODECS,
        engine=engine,
        probe_codec=probe_codec,
    )


@pytest.mark.parametrize("extension", ["mp3", "aac", "ogg", "m4a", "opus"])
def test_lossy_extensions_classify_as_lossy(tmp_path: Path, engine, extension: str) -> None:
    path = tmp_path / f"track.{extension}"
    path.write_bytes(b"audio")

    result = _classify(path, engine)

    assert result.ok
    assert result.file.codec_class is CodecClass.LOSSY
    assert result.file.extension == extension


@pytest.mark.parametrize("extension", ["flac", "wav"])
def test_lossless_extensions_classify_as_lossless(tmp_path: Path, engine, extension: str) -> None:
    path = tmp_path / f"track.{extension}"
    path.write_bytes(b"audio")

    result = _classify(path, engine)

    assert result.ok
    assert result.file.codec_class is CodecClass.LOSSLESS


def test_alac_in_m4a_container_is_lossless(tmp_path: Path, engine) -> None:
    path = tmp_path / "track.m4a"
    path.write_bytes(b"audio")
    engine.codecs["m4a"] = "alac"

    result = _classify(path, engine)

    assert result.file.codec_name == "alac"
    assert result.file.codec_class is CodecClass.LOSSLESS


def test_unlisted_extension_is_rejected(tmp_path: Path, engine) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("not audio")

    result = _classify(path, engine)

    assert not result.ok
    assert isinstance(result.error, UnsupportedFile)
    assert engine.ffprobe_calls == []


def test_extension_match_is_case_insensitive(tmp_path: Path, engine) -> None:
    path = tmp_path / "LOUD.MP3"
    path.write_bytes(b"audio")

    assert _classify(path, engine).ok


def test_missing_file_is_rejected_without_raising(tmp_path: Path, engine) -> None:
    result = _classify(tmp_path / "gone.mp3", engine)

    assert isinstance(result.error, UnsupportedFile)
    assert "does not exist" in result.error.message


def test_probe_failure_is_reported(tmp_path: Path, engine) -> None:
    path = tmp_path / "corrupt.flac"
    path.write_bytes(b"audio")
    engine.fail_names.add("corrupt.flac")

    result = _classify(path, engine)

    assert isinstance(result.error, ClassificationError)


def test_file_without_audio_stream_is_reported(tmp_path: Path, engine) -> None:
    path = tmp_path / "cover.flac"
    path.write_bytes(b"audio")
    engine.codecs["flac"] = ""

    result = _classify(path, engine)

    assert isinstance(result.error, ClassificationError)


def test_codec_probe_can_be_skipped(tmp_path: Path, engine) -> None:
    path = tmp_path / "track.wav"
    path.write_bytes(b"audio")

    result = _classify(path, engine, probe_codec=False)

    assert result.ok
    assert result.file.codec_class is None
    assert engine.ffprobe_calls == []


def test_unwrap_returns_file_or_raises_rejection(tmp_path: Path, engine) -> None:
    good = tmp_path / "track.flac"
    good.write_bytes(b"audio")

    assert _classify(good, engine).unwrap().path == good
    with pytest.raises(UnsupportedFile):
        _classify(tmp_path / "notes.txt", engine).unwrap()
