from __future__ import annotations
from enum import StrEnum

class CaptureMode(StrEnum):
    stdout = "stdout"
    stdout_stderr = "stdout_stderr"
