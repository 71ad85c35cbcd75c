# ffmedia/services/schemas/probe.py
from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ffmedia.domain.enums.stream_type import StreamType


# ---- tiny parse helpers -------------------------------------------------------
def _parse_float(x) -> Optional[float]:
    try:
        if x is None:
            return None
        return float(x)
    except (TypeError, ValueError):
        return None

def _parse_int(x) -> Optional[int]:
    try:
        if x is None:
            return None
        return int(float(x))
    except (TypeError, ValueError):
        return None

def _parse_rate(rate: Optional[str]) -> Optional[float]:
    if not rate or "/" not in rate:
        return _parse_float(rate)
    try:
        n, d = rate.split("/", 1)
        n, d = float(n), float(d)
        if d == 0:
            return None
        return n / d
    except ValueError:
        return None

def _seconds_or_zero(v):
    # ffprobe prints "N/A" for unknown timestamps
    if v is None or (isinstance(v, str) and v.strip() in ("", "N/A")):
        return 0.0
    return v


# ---------- Shared base ----------
class _ProbeModel(BaseModel):
    # unknown ffprobe fields are dropped; results never change after decoding
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class _Tagged(_ProbeModel):
    tags: Dict[str, Any] = Field(default_factory=dict)

    def tag(self, key: str, default: Optional[str] = None) -> Optional[str]:
        val = self.tags.get(key)
        return str(val) if val is not None else default


# ---------- Format ----------
class ProbeFormat(_Tagged):
    filename: str = ""
    nb_streams: int = 0
    nb_programs: int = 0
    format_name: str = ""
    format_long_name: str = ""
    start_time_seconds: float = Field(0.0, alias="start_time")
    duration_seconds: float = Field(0.0, alias="duration")
    size: str = ""
    bit_rate: str = ""
    probe_score: int = 0

    @field_validator("start_time_seconds", "duration_seconds", mode="before")
    @classmethod
    def _zero_times(cls, v):
        return _seconds_or_zero(v)

    @property
    def duration(self) -> timedelta:
        return timedelta(seconds=self.duration_seconds)

    @property
    def start_time(self) -> timedelta:
        return timedelta(seconds=self.start_time_seconds)

    @property
    def size_bytes(self) -> Optional[int]:
        return _parse_int(self.size or None)

    @property
    def bit_rate_bps(self) -> Optional[int]:
        return _parse_int(self.bit_rate or None)


# ---------- Streams ----------
class ProbeDisposition(_ProbeModel):
    default: int = 0
    dub: int = 0
    original: int = 0
    comment: int = 0
    lyrics: int = 0
    karaoke: int = 0
    forced: int = 0
    hearing_impaired: int = 0
    visual_impaired: int = 0
    clean_effects: int = 0
    attached_pic: int = 0
    timed_thumbnails: int = 0


class ProbeStream(_Tagged):
    index: int = 0
    id: str = ""
    codec_name: str = ""
    codec_long_name: str = ""
    profile: str = ""
    codec_type: str = ""
    codec_tag_string: str = ""
    codec_tag: str = ""

    # video
    width: int = 0
    height: int = 0
    coded_width: int = 0
    coded_height: int = 0
    closed_captions: int = 0
    has_b_frames: int = 0
    sample_aspect_ratio: str = ""
    display_aspect_ratio: str = ""
    pix_fmt: str = ""
    level: int = 0
    color_range: str = ""
    color_space: str = ""
    r_frame_rate: str = ""
    avg_frame_rate: str = ""

    # audio
    sample_fmt: str = ""
    sample_rate: str = ""
    channels: int = 0
    channel_layout: str = ""
    bits_per_sample: int = 0

    # timing
    time_base: str = ""
    start_pts: int = 0
    start_time: str = ""
    duration_ts: int = 0
    duration: str = ""
    bit_rate: str = ""
    bits_per_raw_sample: str = ""
    nb_frames: str = ""

    disposition: ProbeDisposition = Field(default_factory=ProbeDisposition)

    @property
    def frame_rate(self) -> Optional[float]:
        # avg_frame_rate is "0/0" for streams without a meaningful rate
        return _parse_rate(self.avg_frame_rate) or _parse_rate(self.r_frame_rate)

    @property
    def duration_seconds(self) -> Optional[float]:
        return _parse_float(self.duration or None)

    @property
    def is_default(self) -> bool:
        return self.disposition.default == 1


# ---------- Top level ----------
class ProbeData(_ProbeModel):
    """
    Decoded `ffprobe -print_format json -show_format -show_streams` output.
    Missing fields take zero/empty defaults; a missing "format" object stays None.
    """
    format: Optional[ProbeFormat] = None
    streams: List[ProbeStream] = Field(default_factory=list)

    def streams_by_type(self, stream_type: StreamType | str) -> List[ProbeStream]:
        wanted = str(stream_type)
        return [s for s in self.streams if s.codec_type == wanted]

    def first_stream(self, stream_type: StreamType | str) -> Optional[ProbeStream]:
        return next(iter(self.streams_by_type(stream_type)), None)

    def first_video_stream(self) -> Optional[ProbeStream]:
        return self.first_stream(StreamType.video)

    def first_audio_stream(self) -> Optional[ProbeStream]:
        return self.first_stream(StreamType.audio)

    def first_subtitle_stream(self) -> Optional[ProbeStream]:
        return self.first_stream(StreamType.subtitle)
