"""Default output heuristics

These defaults are applied by :py:func:`ffedit.configure.resolve_outputs` and
:py:mod:`ffedit.editor` only when the caller leaves the matching option unset.
They may be changed at runtime, e.g., ``ffedit.policy.DEFAULT_IMAGE_DURATION = 3``.
"""

DEFAULT_IMAGE_DURATION = 5
"""seconds of motion output rendered from still-image-only inputs"""

DEFAULT_VIDEO_CODEC = "libx264"
"""codec FFmpeg picks for the common video containers"""

DEFAULT_PIXEL_FORMAT = "yuv420p"
"""pixel format forced when the video codec is unset or the default codec"""

ANIMATED_IMAGE_TYPES = ("image/gif", "image/apng")
"""image MIME types rendered as motion pictures"""

LOOPED_IMAGE_TYPES = ("image/gif",)
"""animated image MIME types which get the infinite loop output option"""

DEFAULT_SAMPLE_RATE = 44100
"""audio sample rate assumed when the source does not report one"""
