from __future__ import annotations

"""Fluent FFmpeg media editing

Edit a media file
-----------------
:py:class:`ffedit.MediaEditor` (type detected from the file)
:py:class:`ffedit.AudioEditor`
:py:class:`ffedit.VideoEditor`
:py:class:`ffedit.ImageEditor`

    ffedit.MediaEditor("clip.mp4").volume(0.5).crop(width=640, height=360).run("out.mp4")

Inspect a media file
--------------------
`ffedit.probe.summary()`
`ffedit.probe.full_details()`
"""

import functools
import logging

logger = logging.getLogger("ffedit")
logger.addHandler(logging.NullHandler())

from . import path, plugins

# register builtin plugins and external plugins found in site-packages
plugins.initialize()

# initialize the paths
try:
    path.find()
except Exception as e:
    logger.warning(str(e))


def __getattr__(name):
    if name == "ffmpeg_ver":
        return path.FFMPEG_VER
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


from .errors import *
from . import errors, ffmpegprocess, filters, mime, options, policy, probe
from .editor import MediaEditor, AudioEditor, VideoEditor, ImageEditor
from .options import OutputOptions
from .utils.parser import FLAG

# fmt:off
__all__ = ["ffmpeg_info", "get_path", "set_path", "is_ready", "ffmpeg", "ffprobe",
    "set_loglevel", "MediaEditor", "AudioEditor", "VideoEditor", "ImageEditor",
    "OutputOptions", "probe", "mime", "policy", "options", "filters", "ffmpegprocess",
    "errors", "FLAG", *errors.__all__]
# fmt:on

__version__ = "0.1.0"

ffmpeg_info = path.versions
set_path = path.find
get_path = path.where
is_ready = path.found
ffmpeg = path.ffmpeg
ffprobe = path.ffprobe


@functools.cache
def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
    logger.addHandler(handler)
    return handler


def set_loglevel(level: int | str):
    """log ffedit messages to the console

    :param level: logging level, e.g., ``logging.DEBUG`` or ``"INFO"``
    """
    _console_handler().setLevel(level)
    logger.setLevel(level)
