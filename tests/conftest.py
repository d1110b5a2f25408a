from __future__ import annotations

from pathlib import Path

import pytest

from adjust_volume.application.audio_engine import EngineResult
from adjust_volume.infrastructure.staging import StagingArea
from adjust_volume.utils.config import RunConfig

LOUDNORM_STDERR = """\
Input #0, mp3, from 'song.mp3':
  Duration: 00:03:12.40, start: 0.025057, bitrate: 320 kb/s
Stream mapping:
  Stream #0:0 -> #0:0 (mp3 (mp3float) -> pcm_s16le (native))
size=N/A time=00:03:12.39 bitrate=N/A speed= 214x
[Parsed_loudnorm_0 @ 0x55d5c8c0e2c0]
{
\t"input_i" : "-27.61",
\t"input_tp" : "-4.47",
\t"input_lra" : "18.06",
\t"input_thresh" : "-39.20",
\t"output_i" : "-16.58",
\t"output_tp" : "-1.50",
\t"output_lra" : "14.78",
\t"output_thresh" : "-27.71",
\t"normalization_type" : "dynamic",
\t"target_offset" : "0.58"
}
"""

# ffprobe codec names keyed by file extension.
PROBED_CODECS = {
    "mp3": "mp3",
    "aac": "aac",
    "ogg": "vorbis",
    "m4a": "aac",
    "opus": "opus",
    "flac": "flac",
    "wav": "pcm_s16le",
}


class FakeEngine:
    """Stands in for ffmpeg/ffprobe and records every invocation."""

    def __init__(self) -> None:
        self.ffmpeg_calls: list[list[str]] = []
        self.ffprobe_calls: list[list[str]] = []
        self.peak_db = "-6.0"
        self.loudnorm_stderr = LOUDNORM_STDERR
        self.fail_names: set[str] = set()
        self.codecs = dict(PROBED_CODECS)

    def run_ffmpeg(self, args) -> EngineResult:
        args = list(args)
        self.ffmpeg_calls.append(args)
        source = Path(args[args.index("-i") + 1])
        if source.name in self.fail_names:
            return EngineResult(returncode=1, stderr=f"{source}: Invalid data found when processing input\n")

        audio_filter = args[args.index("-af") + 1]
        output = args[-1]
        if output == "-":
            if audio_filter == "volumedetect":
                return EngineResult(
                    returncode=0,
                    stderr=(
                        "[Parsed_volumedetect_0 @ 0x1] n_samples: 882000\n"
                        "[Parsed_volumedetect_0 @ 0x1] mean_volume: -21.3 dB\n"
                        f"[Parsed_volumedetect_0 @ 0x1] max_volume: {self.peak_db} dB\n"
                    ),
                )
            return EngineResult(returncode=0, stderr=self.loudnorm_stderr)

        Path(output).write_bytes(b"adjusted:" + source.read_bytes())
        return EngineResult(returncode=0)

    def run_ffprobe(self, args) -> EngineResult:
        args = list(args)
        self.ffprobe_calls.append(args)
        path = Path(args[-1])
        if "stream=sample_rate" in args:
            return EngineResult(returncode=0, stdout="44100\n")
        if path.name in self.fail_names:
            return EngineResult(returncode=1, stderr="Invalid data found when processing input\n")
        codec = self.codecs.get(path.suffix.lstrip(".").lower(), "")
        return EngineResult(returncode=0, stdout=f"{codec}\n" if codec else "")

    def filters_for(self, name: str) -> list[str]:
        """Audio filters of ffmpeg calls that wrote a file for source ``name``."""

        return [
            call[call.index("-af") + 1]
            for call in self.ffmpeg_calls
            if Path(call[call.index("-i") + 1]).name == name and call[-1] != "-"
        ]


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def staging(cache_dir: Path) -> StagingArea:
    area = StagingArea(cache_dir)
    area.prepare()
    return area


@pytest.fixture
def make_config(cache_dir: Path):
    def _make(**overrides) -> RunConfig:
        return RunConfig.model_validate({"cache_dir": cache_dir, **overrides})

    return _make


@pytest.fixture
def library(tmp_path: Path) -> Path:
    root = tmp_path / "library"
    (root / "album").mkdir(parents=True)
    return root
