from __future__ import annotations

from typing import Any
from numbers import Number
import json, re, logging
from fractions import Fraction
from functools import lru_cache

logger = logging.getLogger("ffedit")

from ._typing import StreamSummary
from .errors import MetadataError
from .path import ffprobe, PIPE

# fmt:off
__all__ = ['full_details', 'summary']
# fmt:on

_re_ratio = re.compile(r"^(\d+)\:(\d+)$")


def _items_to_numeric(d):
    def try_conv(v):
        if v == "N/A":
            return None
        if isinstance(v, dict):
            return _items_to_numeric(v)
        if isinstance(v, list):
            return [try_conv(e) for e in v]
        if not isinstance(v, str):
            return v

        try:
            return int(v)
        except ValueError:
            try:
                return float(v)
            except ValueError:
                # convert ratio to fraction ':' -> '/' if
                v = _re_ratio.sub(r"\1/\2", v)

                try:
                    return Fraction(v)
                except (ValueError, ZeroDivisionError):
                    return v

    return {k: try_conv(v) for k, v in d.items()}


def _exec(url: str, sp_kwargs: tuple[tuple[str, Any]] | None = None) -> dict:
    """execute ffprobe and return stdout as dict"""

    sp_opts = {"stdout": PIPE, "stderr": PIPE, "universal_newlines": True}
    if sp_kwargs is not None:
        sp_opts = {**dict(sp_kwargs), **sp_opts}

    args = ["-hide_banner", "-of", "json", "-show_format", "-show_streams", url]

    ret = ffprobe(args, **sp_opts)
    if ret.returncode != 0:
        raise MetadataError(
            f"failed to get media info of {url}: ffprobe execution failed\n\n{ret.stderr}\n"
        )

    try:
        return json.loads(ret.stdout)
    except json.JSONDecodeError as e:
        raise MetadataError(f"failed to decode ffprobe output for {url}") from e


@lru_cache()
def _exec_cached(*args) -> dict:
    """execute ffprobe, return stdout as dict, and cache its output"""
    return _exec(*args)


def full_details(
    url: str,
    keep_str_values: bool | None = False,
    cache_output: bool | None = False,
    sp_kwargs: dict[str, Any] | None = None,
) -> dict[str, str | Number | Fraction]:
    """Retrieve full details of a media file

    :param url: URL of the media file/stream
    :type url: str
    :param keep_str_values: True to keep all field values as str,
                            defaults to False to convert numeric values
    :type keep_str_values: bool, optional
    :param cache_output: True to cache FFprobe output, defaults to False
    :type cache_output: bool, optional
    :param sp_kwargs: Additional keyword arguments for :py:func:`subprocess.run`,
                      default to None
    :type sp_kwargs: dict[str, Any], optional
    :return: media file information with ``"format"`` and ``"streams"`` entries
    :rtype: dict[str, str|Number|Fraction]

    """

    if sp_kwargs is not None:
        sp_kwargs = tuple(sp_kwargs.items())

    results = (_exec_cached if cache_output else _exec)(url, sp_kwargs)
    results.setdefault("streams", [])
    results.setdefault("format", {})

    return results if keep_str_values else _items_to_numeric(results)


def _to_int(value) -> int | None:
    try:
        return None if value is None else int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value) -> float | None:
    try:
        return None if value is None else float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def summarize(details: dict) -> StreamSummary:
    """Reduce ffprobe full details to a stream summary

    :param details: output of :py:func:`full_details` (with numeric values)
    :return: simplified metadata of the first video and first audio streams
    """

    streams = details.get("streams", None) or []
    fmt = details.get("format", None) or {}

    video = next((st for st in streams if st.get("codec_type") == "video"), None)
    audio = next((st for st in streams if st.get("codec_type") == "audio"), None)
    video = video or {}
    audio = audio or {}

    aspect_ratio = video.get("display_aspect_ratio", None)
    if isinstance(aspect_ratio, Fraction):
        aspect_ratio = f"{aspect_ratio.numerator}:{aspect_ratio.denominator}"

    return StreamSummary(
        has_audio=bool(audio),
        has_video=bool(video),
        duration=_to_float(fmt.get("duration", None)),
        size=_to_int(fmt.get("size", None)),
        bit_rate=_to_int(fmt.get("bit_rate", None)),
        width=_to_int(video.get("width", None)),
        height=_to_int(video.get("height", None)),
        aspect_ratio=aspect_ratio,
        frame_count=_to_int(video.get("nb_frames", None)),
        frame_rate=_to_float(video.get("r_frame_rate", None)),
        audio_channels=_to_int(audio.get("channels", None)),
        audio_sample_rate=_to_int(audio.get("sample_rate", None)),
        format_name=fmt.get("format_name", None),
        tags=dict(fmt.get("tags", None) or {}),
    )


def summary(url: str, cache_output: bool | None = True) -> StreamSummary:
    """Retrieve the simplified metadata of a media file

    :param url: path of the media file
    :param cache_output: True to cache FFprobe output, defaults to True
    :return: stream summary: presence of audio/video streams, duration, frame
             size and rate, audio sample rate, bit rate and format tags
    """

    info = summarize(full_details(url, cache_output=cache_output))
    logger.debug("probed %s: %s", url, info)
    return info
