# ffmedia/services/ffmpeg/ffmpeg_adapter.py
from __future__ import annotations

from typing import Optional

from ffmedia.common.concurrency.context import CancelContext
from ffmedia.common.ffmpeg.ffmpeg_helpers import (
    build_convert_mp4_args,
    build_extract_images_args,
    convert_mp4_target,
    extract_images_target,
)
from ffmedia.common.logging import get_logger
from ffmedia.common.settings import get_settings
from ffmedia.domain.entities.options import ExtractingImagesOption, MP4ConvertOption
from ffmedia.domain.errors import NotConfiguredError
from ffmedia.domain.ports.media_processing import MediaProcessingPort
from ffmedia.services.process.runner import ProcessRunner

logger = get_logger(__name__)


class FFmpegAdapter(MediaProcessingPort):
    """
    Frame extraction and mp4 conversion through `ffmpeg`.
    Options are passed per call; the adapter itself only holds the binary and default timeout.
    """

    def __init__(
        self,
        ffmpeg_bin: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        cfg = get_settings()
        self.ffmpeg_bin = ffmpeg_bin or cfg.ffmpeg.bin
        self.timeout_sec = float(cfg.ffmpeg.timeout_sec if timeout_sec is None else timeout_sec)
        self.runner = runner or ProcessRunner()

    # ---- frames -------------------------------------------------------------
    def extract_images(
        self,
        option: Optional[ExtractingImagesOption],
        timeout_sec: Optional[float] = None,
    ) -> str:
        with CancelContext.with_timeout(self.timeout_sec if timeout_sec is None else timeout_sec) as ctx:
            return self.extract_images_context(ctx, option)

    def extract_images_context(self, ctx: CancelContext, option: Optional[ExtractingImagesOption]) -> str:
        """
        Write frames of option.file_path as numbered jpegs (intro.mp4 -> intro-001.jpeg, ...).
        Returns the ffmpeg output pattern; the written files are not listed.
        """
        if option is None:
            raise NotConfiguredError("extracting images option not set", binary=self.ffmpeg_bin)
        if (option.output_width is None) != (option.output_height is None):
            logger.debug("ignoring partial resize for %s (need both width and height)", option.file_path)

        args = build_extract_images_args(option)
        self.runner.run(self.ffmpeg_bin, args, ctx)
        return extract_images_target(option)

    # ---- conversion ---------------------------------------------------------
    def convert_to_mp4(
        self,
        option: Optional[MP4ConvertOption],
        timeout_sec: Optional[float] = None,
    ) -> str:
        with CancelContext.with_timeout(self.timeout_sec if timeout_sec is None else timeout_sec) as ctx:
            return self.convert_to_mp4_context(ctx, option)

    def convert_to_mp4_context(self, ctx: CancelContext, option: Optional[MP4ConvertOption]) -> str:
        """
        Convert option.file_path to `<stem>.mp4`. Without overwrite, an existing target is
        left for ffmpeg to handle (it fails since stdin is not interactive).
        """
        if option is None:
            raise NotConfiguredError("mp4 convert option not set", binary=self.ffmpeg_bin)

        args = build_convert_mp4_args(option)
        self.runner.run(self.ffmpeg_bin, args, ctx)
        return convert_mp4_target(option)
