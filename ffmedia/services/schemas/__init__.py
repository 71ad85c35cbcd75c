from ffmedia.services.schemas.probe import (
    ProbeData,
    ProbeDisposition,
    ProbeFormat,
    ProbeStream,
)

__all__ = [
    "ProbeData",
    "ProbeDisposition",
    "ProbeFormat",
    "ProbeStream",
]
