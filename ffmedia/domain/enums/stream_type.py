from __future__ import annotations
from enum import StrEnum

class StreamType(StrEnum):
    video = "video"
    audio = "audio"
    subtitle = "subtitle"
    data = "data"
    attachment = "attachment"
