"""ffedit object independent common type hints"""

from __future__ import annotations

from typing import *
from typing_extensions import *

from os import PathLike

FFmpegOptionDict = dict[str, Any]
"""FFmpeg options with their values keyed by the option names without preceding dash.
For option flags (e.g., -y) without any value, use `None` or its alias `ffedit.FLAG`"""

FFmpegInputOptionTuple = tuple[str, FFmpegOptionDict]
FFmpegOutputOptionTuple = tuple[str, FFmpegOptionDict]


class FFmpegArgs(TypedDict):
    """FFmpeg arguments"""

    inputs: list[FFmpegInputOptionTuple]
    # list of input definitions (pairs of url and options)
    outputs: list[FFmpegOutputOptionTuple]
    # list of output definitions (pairs of url and options)
    global_options: FFmpegOptionDict  # FFmpeg global options


MediaType = Literal["audio", "image", "video"]
"""Kind of media source: a sound file, a still image, or a moving picture"""

Channel = Literal["a", "v"]
"""Filtergraph stream channel: audio or video"""

StreamSelector = Literal["audio", "video", "all"]
"""Streams a two-channel filter (trim, fade, ...) is applied to"""

TargetCategory = Literal["audio", "image", "animated", "video"]
"""Output container category derived from its MIME type

- ``"audio"`` - audio-only container
- ``"image"`` - still image, single frame
- ``"animated"`` - animated image (gif, apng, ...), motion without audio
- ``"video"`` - motion picture container with optional audio
"""

PathType = Union[str, PathLike, Sequence[str]]
"""File path; a sequence of str is joined as path components"""


class StreamSummary(TypedDict):
    """Simplified media metadata, as produced by :py:func:`ffedit.probe.summary`"""

    has_audio: bool
    has_video: bool
    duration: NotRequired[float | None]  # seconds
    size: NotRequired[int | None]  # bytes
    bit_rate: NotRequired[int | None]  # bits/second
    width: NotRequired[int | None]
    height: NotRequired[int | None]
    aspect_ratio: NotRequired[str | None]
    frame_count: NotRequired[int | None]
    frame_rate: NotRequired[float | None]  # frames/second
    audio_channels: NotRequired[int | None]
    audio_sample_rate: NotRequired[int | None]  # samples/second
    format_name: NotRequired[str | None]
    tags: NotRequired[dict[str, str]]
