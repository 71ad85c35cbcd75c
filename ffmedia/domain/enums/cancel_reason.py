from __future__ import annotations
from enum import StrEnum

class CancelReason(StrEnum):
    canceled = "canceled"
    deadline_exceeded = "deadline exceeded"
