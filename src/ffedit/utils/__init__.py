from __future__ import annotations

import re
from os import path as _path, PathLike

from .._typing import PathType

__all__ = ["normalize_path", "parse_time_duration", "escape_filter_value", "format_number"]

_re_opt_special = re.compile(r"([\\':])")
_re_needs_quote = re.compile(r"[\\':,;\[\]]")


def normalize_path(path: PathType) -> str:
    """convert path-like or a sequence of path components to a str path

    :param path: file path or sequence of its components
    :return: joined path, empty if not given
    """

    if path is None:
        return ""
    if isinstance(path, (str, PathLike)):
        return str(path)
    return _path.join(*(str(p) for p in path)) if len(path) else ""


def parse_time_duration(expr: str | float) -> float:
    """convert time/duration expression to seconds

    if expr is not str, the input is returned without any processing

    :param expr: time/duration expression (or in seconds to pass through)
    :return: time/duration in seconds
    """
    if isinstance(expr, str):
        m = re.match(r"(-)?((\d{2})\:)?(\d{2}):(\d{2}(?:\.\d+)?)$", expr)
        if m:
            s = int(m[4]) * 60 + float(m[5])
            if m[2]:
                s += 3600 * int(m[3])
            return -s if m[1] else s
        m = re.match(r"(-)?(\d+(?:\.\d+)?)(s|ms|us)?$", expr)
        if m:
            s = float(m[2])
            if m[3] == "ms":
                s *= 1e-3
            elif m[3] == "us":
                s *= 1e-6
            return -s if m[1] else s
        raise ValueError(f"invalid time duration: {expr!r}")
    return expr


def escape_filter_value(value: str) -> str:
    """escape a free-text filter option value for a filtergraph

    The value is escaped for the filter option parser then quoted for the
    filtergraph parser. Plain values are returned as is.
    """

    if not _re_needs_quote.search(value):
        return value
    value = _re_opt_special.sub(r"\\\1", value)
    return "'" + value.replace("'", "'\\''") + "'"


def format_number(value: float | int) -> str:
    """format a number like FFmpeg expressions expect it: no trailing ``.0``"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
