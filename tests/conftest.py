# tests/conftest.py
from __future__ import annotations
import json
import os
import stat
from pathlib import Path

import pytest

from ffmedia.common import settings as settings_mod
from tests.fakes import SAMPLE_PROBE


@pytest.fixture(autouse=True)
def _fresh_settings():
    # settings are cached process-wide; every test sees the current environment
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()

@pytest.fixture()
def sample_probe() -> dict:
    return json.loads(json.dumps(SAMPLE_PROBE))

@pytest.fixture()
def make_bin(tmp_path):
    """
    Factory writing an executable POSIX shell script into tmp_path/bin and returning its path.
    Used as a stand-in for ffprobe/ffmpeg.
    """
    if os.name != "posix":
        pytest.skip("fake binaries are shell scripts")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> str:
        p = bin_dir / name
        p.write_text("#!/bin/sh\n" + body + "\n")
        p.chmod(p.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(p)

    return _make

@pytest.fixture()
def args_file(tmp_path) -> Path:
    """Where recording fakes dump their argv, one argument per line."""
    return tmp_path / "argv.txt"

