from __future__ import annotations

import json
from pathlib import Path

import pytest

from adjust_volume import loudness
from adjust_volume.domain.errors import AnalysisError, NormalizationError
from adjust_volume.domain.models import LoudnessStatistics
from adjust_volume.utils.config import MeasurementProfile, TargetConfig

STATS = LoudnessStatistics(
    input_i=-27.61,
    input_tp=-4.47,
    input_lra=18.06,
    input_thresh=-39.2,
    target_offset=0.58,
)


def test_extract_json_block_ignores_noise_and_keeps_nested_braces() -> None:
    block = '{\n  "outer": {"inner": {"value": "1"}},\n  "note": "brace } inside string {"\n}'
    text = (
        "[mp3 @ 0x1] Estimating duration from bitrate\n"
        "[Parsed_loudnorm_0 @ 0x2]\n"
        f"{block}\n"
        "[out#0/null @ 0x3] video:0kB audio:16538kB\n"
        "{ trailing noise }\n"
    )

    extracted = loudness.extract_json_block(text)

    assert extracted == block
    assert json.loads(extracted)["outer"]["inner"]["value"] == "1"


def test_extract_json_block_ignores_braces_inside_log_lines() -> None:
    text = "Input #0, mp3, from 'song{1}.mp3':\n{\n\t\"input_i\" : \"-20.00\"\n}\n"

    assert loudness.extract_json_block(text) == '{\n\t"input_i" : "-20.00"\n}'


@pytest.mark.parametrize("text", ["", "no statistics here\n", "{\n\t\"input_i\" : \"-20\"\n"])
def test_extract_json_block_without_complete_block_raises(text: str) -> None:
    with pytest.raises(AnalysisError):
        loudness.extract_json_block(text)


def test_parse_statistics_reads_loudnorm_block(engine) -> None:
    stats = loudness.parse_statistics(engine.loudnorm_stderr)

    assert stats == STATS


def test_parse_statistics_rejects_silence() -> None:
    text = '{\n"input_i" : "-inf",\n"input_tp" : "-inf",\n"input_lra" : "0.00",\n"input_thresh" : "-70.00",\n"target_offset" : "inf"\n}'

    with pytest.raises(AnalysisError, match="silent"):
        loudness.parse_statistics(text)


def test_parse_statistics_rejects_missing_field() -> None:
    with pytest.raises(AnalysisError, match="target_offset"):
        loudness.parse_statistics('{\n"input_i" : "-20", "input_tp" : "-1", "input_lra" : "5", "input_thresh" : "-30"\n}')


def test_analyze_uses_reference_profile_not_final_targets(tmp_path: Path, engine) -> None:
    source = tmp_path / "song.mp3"
    source.write_bytes(b"mp3")

    stats = loudness.analyze(source, MeasurementProfile(), engine)

    assert stats == STATS
    measurement_call = engine.ffmpeg_calls[0]
    assert measurement_call[measurement_call.index("-af") + 1] == (
        "loudnorm=I=-16.00:TP=-1.50:LRA=11.00:print_format=json"
    )
    assert measurement_call[-3:] == ["-f", "null", "-"]


def test_analyze_engine_failure_raises_analysis_error(tmp_path: Path, engine) -> None:
    source = tmp_path / "corrupt.mp3"
    source.write_bytes(b"mp3")
    engine.fail_names.add("corrupt.mp3")

    with pytest.raises(AnalysisError):
        loudness.analyze(source, MeasurementProfile(), engine)


def test_build_loudnorm_filter_passes_measurements_through() -> None:
    filter_spec = loudness.build_loudnorm_filter(STATS, TargetConfig())

    assert filter_spec == (
        "loudnorm=I=-12.00:TP=-1.50:LRA=20.00"
        ":measured_I=-27.61:measured_TP=-4.47:measured_LRA=18.06"
        ":measured_thresh=-39.20:offset=0.58:linear=true"
    )


def test_normalize_writes_staged_file_at_source_sample_rate(tmp_path: Path, engine) -> None:
    source = tmp_path / "song.mp3"
    source.write_bytes(b"mp3")
    staged = tmp_path / "cache" / "song.mp3"
    staged.parent.mkdir()

    written = loudness.normalize(source, STATS, TargetConfig(), staged, engine)

    assert written == staged
    assert staged.read_bytes() == b"adjusted:mp3"
    call = engine.ffmpeg_calls[-1]
    assert call[call.index("-ar") + 1] == "44100"
    assert call[-1] == str(staged)


def test_normalize_engine_failure_leaves_no_staged_file(tmp_path: Path, engine) -> None:
    source = tmp_path / "song.mp3"
    source.write_bytes(b"mp3")
    staged = tmp_path / "song-staged.mp3"
    engine.fail_names.add("song.mp3")

    with pytest.raises(NormalizationError):
        loudness.normalize(source, STATS, TargetConfig(), staged, engine)

    assert not staged.exists()
