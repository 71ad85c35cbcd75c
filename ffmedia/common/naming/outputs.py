# ffmedia/common/naming/outputs.py
from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional

FRAME_INDEX_SUFFIX = "-%03d"  # filled in per frame by ffmpeg's image2 muxer
FRAME_IMAGE_EXT = ".jpeg"
MP4_EXT = ".mp4"


def strip_ext(file_path: str | os.PathLike[str]) -> str:
    """
    Base name of `file_path` with its last extension removed.
    'clips/intro.mp4' -> 'intro', 'a.tar.gz' -> 'a.tar', 'noext' -> 'noext'.
    A leading dot counts as an extension ('.hidden' -> '').
    """
    base = PurePath(os.fspath(file_path)).name
    dot = base.rfind(".")
    return base[:dot] if dot >= 0 else base


def frame_output_pattern(file_path: str | os.PathLike[str]) -> str:
    """'intro.mp4' -> 'intro-%03d.jpeg'"""
    return strip_ext(file_path) + FRAME_INDEX_SUFFIX + FRAME_IMAGE_EXT


def mp4_output_name(file_path: str | os.PathLike[str]) -> str:
    """'target.mov' -> 'target.mp4'"""
    return strip_ext(file_path) + MP4_EXT


def in_output_dir(name: str, output_dir: Optional[str | os.PathLike[str]]) -> str:
    """Place `name` under `output_dir`; without one it stays relative to the working directory."""
    if output_dir is None:
        return name
    return str(Path(output_dir) / name)
