from ffmedia.domain.enums.cancel_reason import CancelReason
from ffmedia.domain.enums.capture_mode import CaptureMode
from ffmedia.domain.enums.stream_type import StreamType
__all__ = [
    "CancelReason",
    "CaptureMode",
    "StreamType",
]
