# ffmedia/common/ffmpeg/ffmpeg_helpers.py
from __future__ import annotations
import os
from typing import List

from ffmedia.common.naming.outputs import frame_output_pattern, in_output_dir, mp4_output_name
from ffmedia.domain.entities.options import ExtractingImagesOption, MP4ConvertOption

IMAGE_MUXER = "image2"
OVERWRITE_FLAG = "-y"


def extract_images_target(option: ExtractingImagesOption) -> str:
    return in_output_dir(frame_output_pattern(option.file_path), option.output_dir)


def convert_mp4_target(option: MP4ConvertOption) -> str:
    return in_output_dir(mp4_output_name(option.file_path), option.output_dir)


def build_extract_images_args(option: ExtractingImagesOption) -> List[str]:
    """
    ffmpeg -i intro.mp4 -r 0.5 -s 640x320 -f image2 intro-%03d.jpeg
    The -s pair is only emitted when both width and height are set.
    """
    args = [
        "-i", os.fspath(option.file_path),
        "-r", option.frame_rate,
    ]
    if option.resize:
        args += ["-s", f"{int(option.output_width)}x{int(option.output_height)}"]
    args += ["-f", IMAGE_MUXER, extract_images_target(option)]
    return args


def build_convert_mp4_args(option: MP4ConvertOption) -> List[str]:
    """ffmpeg -i target.mov target.mp4 [-y]"""
    args = ["-i", os.fspath(option.file_path), convert_mp4_target(option)]
    if option.overwrite:
        args.append(OVERWRITE_FLAG)
    return args
