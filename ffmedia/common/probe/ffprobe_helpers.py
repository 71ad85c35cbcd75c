# ffmedia/common/probe/ffprobe_helpers.py
from __future__ import annotations
import os
from typing import Iterable, List

from pydantic import ValidationError

from ffmedia.common.logging import get_logger
from ffmedia.domain.errors import ProbeDecodeError
from ffmedia.services.schemas.probe import ProbeData

logger = get_logger(__name__)

# -v quiet for the plain probe, -loglevel fatal when stderr is captured as an error channel
QUIET_LOGGING = ("-v", "quiet")
FATAL_LOGGING = ("-loglevel", "fatal")
JSON_FORMAT_AND_STREAMS = ("-print_format", "json", "-show_format", "-show_streams")


def build_ffprobe_args(
    input_path: str | os.PathLike[str],
    extra_args: Iterable[str] | None = None,
    *,
    logging_args: Iterable[str] = QUIET_LOGGING,
) -> List[str]:
    """
    Build ffprobe arguments (without the binary) that emit format+streams JSON.
    Extra arguments go right before the input path.
    """
    args = [*logging_args, *JSON_FORMAT_AND_STREAMS]
    if extra_args:
        args.extend(extra_args)
    args.append(os.fspath(input_path))
    return args


def decode_probe_data(raw: bytes | str, *, binary: str = "ffprobe") -> ProbeData:
    """
    Parse ffprobe JSON into ProbeData. Safe to call in unit tests with fixture JSON.
    Raises ProbeDecodeError (with an empty `partial` result) when the payload is not the expected shape.
    """
    try:
        return ProbeData.model_validate_json(raw or b"")
    except ValidationError as e:
        logger.error("Failed to parse ffprobe JSON: %s", e)
        raise ProbeDecodeError("error unmarshalling ffprobe output", binary=binary, partial=ProbeData()) from e
