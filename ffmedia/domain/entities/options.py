# ffmedia/domain/entities/options.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_FRAME_RATE = "1"


@dataclass(frozen=True)
class ExtractingImagesOption:
    """
    Per-call settings for extracting frames into numbered images.
    `frame_rate` is handed to ffmpeg's -r verbatim ("1", "0.5", "30000/1001").
    Resizing happens only when both output_width and output_height are set;
    a single dimension is accepted and ignored.
    """
    file_path: str | Path
    frame_rate: str = DEFAULT_FRAME_RATE
    output_width: Optional[int] = None
    output_height: Optional[int] = None
    output_dir: Optional[Path] = None

    @classmethod
    def default(cls, file_path: str | Path) -> "ExtractingImagesOption":
        return cls(file_path=file_path, frame_rate=DEFAULT_FRAME_RATE)

    @property
    def resize(self) -> bool:
        return self.output_width is not None and self.output_height is not None


@dataclass(frozen=True)
class MP4ConvertOption:
    """Per-call settings for converting a media file to `<stem>.mp4`."""
    file_path: str | Path
    overwrite: bool = False
    output_dir: Optional[Path] = None

    @classmethod
    def default(cls, file_path: str | Path) -> "MP4ConvertOption":
        return cls(file_path=file_path, overwrite=True)
