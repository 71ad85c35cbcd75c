from __future__ import annotations

from typing import Optional, Protocol
from ffmedia.common.concurrency.context import CancelContext
from ffmedia.domain.entities.options import ExtractingImagesOption, MP4ConvertOption


class MediaProcessingPort(Protocol):
    def extract_images(
        self,
        option: Optional[ExtractingImagesOption],
        timeout_sec: Optional[float] = None,
    ) -> str: ...

    def extract_images_context(
        self,
        ctx: CancelContext,
        option: Optional[ExtractingImagesOption],
    ) -> str: ...              # returns the output pattern, e.g. "intro-%03d.jpeg"

    def convert_to_mp4(
        self,
        option: Optional[MP4ConvertOption],
        timeout_sec: Optional[float] = None,
    ) -> str: ...

    def convert_to_mp4_context(
        self,
        ctx: CancelContext,
        option: Optional[MP4ConvertOption],
    ) -> str: ...              # returns the output path, e.g. "target.mp4"
