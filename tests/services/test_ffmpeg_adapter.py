from pathlib import Path

import pytest

from ffmedia.common.concurrency.context import CancelContext
from ffmedia.domain.entities.options import ExtractingImagesOption, MP4ConvertOption
from ffmedia.domain.errors import BinaryNotFoundError, NotConfiguredError, ProcessExecutionError, ProcessTimeoutError
from ffmedia.services.ffmpeg.ffmpeg_adapter import FFmpegAdapter
from tests.fakes import read_args, record_args


class _RecordingRunner:
    """Test double standing in for ProcessRunner."""

    def __init__(self):
        self.calls = []

    def run(self, binary, args, ctx, **kwargs):
        self.calls.append((binary, list(args), kwargs))
        return b""


@pytest.fixture()
def fake_ffmpeg(make_bin, args_file):
    return make_bin("ffmpeg", record_args(args_file))


def test_extract_without_option_spawns_nothing(tmp_path):
    runner = _RecordingRunner()
    adapter = FFmpegAdapter(ffmpeg_bin=str(tmp_path / "does-not-exist"), runner=runner)
    with pytest.raises(NotConfiguredError):
        adapter.extract_images(None, timeout_sec=5)
    with CancelContext.with_timeout(5) as ctx:
        with pytest.raises(NotConfiguredError):
            adapter.extract_images_context(ctx, None)
    assert runner.calls == []


def test_convert_without_option_spawns_nothing(tmp_path):
    runner = _RecordingRunner()
    adapter = FFmpegAdapter(ffmpeg_bin="ffmpeg", runner=runner)
    with pytest.raises(NotConfiguredError):
        adapter.convert_to_mp4(None)
    assert runner.calls == []


def test_extract_images_invocation(fake_ffmpeg, args_file, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    adapter = FFmpegAdapter(ffmpeg_bin=fake_ffmpeg)
    opt = ExtractingImagesOption(file_path="/media/intro.mp4", frame_rate="0.5", output_width=640, output_height=320)

    target = adapter.extract_images(opt, timeout_sec=10)

    assert target == "intro-%03d.jpeg"
    assert read_args(args_file) == [
        "-i", "/media/intro.mp4", "-r", "0.5", "-s", "640x320", "-f", "image2", "intro-%03d.jpeg",
    ]


def test_extract_images_width_only_is_ignored(fake_ffmpeg, args_file):
    adapter = FFmpegAdapter(ffmpeg_bin=fake_ffmpeg)
    opt = ExtractingImagesOption(file_path="intro.mp4", output_width=640)
    with CancelContext.with_timeout(10) as ctx:
        adapter.extract_images_context(ctx, opt)
    assert read_args(args_file) == ["-i", "intro.mp4", "-r", "1", "-f", "image2", "intro-%03d.jpeg"]


def test_extract_images_writes_into_output_dir(make_bin, tmp_path):
    # behaves like ffmpeg's image2 muxer: one numbered file per frame
    out_dir = tmp_path / "frames"
    out_dir.mkdir()
    tool = make_bin("ffmpeg", 'for a; do pattern=$a; done\nfor i in 1 2 3; do touch "$(printf "$pattern" "$i")"; done')
    adapter = FFmpegAdapter(ffmpeg_bin=tool)

    target = adapter.extract_images(ExtractingImagesOption(file_path="clip.mov", output_dir=out_dir), timeout_sec=10)

    assert target == str(out_dir / "clip-%03d.jpeg")
    assert sorted(p.name for p in out_dir.iterdir()) == ["clip-001.jpeg", "clip-002.jpeg", "clip-003.jpeg"]


def test_convert_to_mp4_invocation(fake_ffmpeg, args_file):
    adapter = FFmpegAdapter(ffmpeg_bin=fake_ffmpeg)
    target = adapter.convert_to_mp4(MP4ConvertOption.default("in/target.mov"), timeout_sec=10)
    assert target == "target.mp4"
    assert read_args(args_file) == ["-i", "in/target.mov", "target.mp4", "-y"]


def test_convert_to_mp4_without_overwrite(fake_ffmpeg, args_file, tmp_path):
    adapter = FFmpegAdapter(ffmpeg_bin=fake_ffmpeg)
    opt = MP4ConvertOption(file_path=Path("target.mov"), overwrite=False, output_dir=tmp_path)
    with CancelContext.with_timeout(10) as ctx:
        target = adapter.convert_to_mp4_context(ctx, opt)
    assert target == str(tmp_path / "target.mp4")
    assert read_args(args_file) == ["-i", "target.mov", str(tmp_path / "target.mp4")]


def test_ffmpeg_failure_surfaces(make_bin):
    tool = make_bin("ffmpeg", "echo 'File exists. Exiting.' >&2\nexit 1")
    with pytest.raises(ProcessExecutionError) as ei:
        FFmpegAdapter(ffmpeg_bin=tool).convert_to_mp4(MP4ConvertOption("a.mov"), timeout_sec=10)
    assert "File exists" in ei.value.stderr


def test_missing_ffmpeg_binary(tmp_path):
    adapter = FFmpegAdapter(ffmpeg_bin=str(tmp_path / "ffmpeg"))
    with pytest.raises(BinaryNotFoundError):
        adapter.extract_images(ExtractingImagesOption.default("a.mp4"), timeout_sec=5)
    with pytest.raises(BinaryNotFoundError):
        adapter.convert_to_mp4(MP4ConvertOption.default("a.mov"), timeout_sec=5)


def test_slow_ffmpeg_times_out(make_bin):
    tool = make_bin("ffmpeg", "exec sleep 30")
    with pytest.raises(ProcessTimeoutError):
        FFmpegAdapter(ffmpeg_bin=tool).convert_to_mp4(MP4ConvertOption.default("a.mov"), timeout_sec=0.3)


def test_adapter_uses_stdout_only_capture():
    runner = _RecordingRunner()
    FFmpegAdapter(ffmpeg_bin="ffmpeg", runner=runner).convert_to_mp4(MP4ConvertOption("a.mov"), timeout_sec=5)
    binary, args, kwargs = runner.calls[0]
    assert binary == "ffmpeg"
    assert args == ["-i", "a.mov", "a.mp4"]
    assert kwargs == {}


def test_zero_timeout_is_honored_not_replaced_by_default(make_bin):
    tool = make_bin("ffmpeg", "exec sleep 30")
    adapter = FFmpegAdapter(ffmpeg_bin=tool, timeout_sec=60)
    with pytest.raises(ProcessTimeoutError):
        adapter.convert_to_mp4(MP4ConvertOption.default("a.mov"), timeout_sec=0)
    with pytest.raises(ProcessTimeoutError):
        adapter.extract_images(ExtractingImagesOption.default("a.mp4"), timeout_sec=0)


def test_zero_adapter_timeout_is_kept(monkeypatch):
    monkeypatch.setenv("FFMPEG__TIMEOUT_SEC", "30")
    assert FFmpegAdapter(ffmpeg_bin="ffmpeg", timeout_sec=0).timeout_sec == 0.0
