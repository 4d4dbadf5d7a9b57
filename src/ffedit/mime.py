from __future__ import annotations

import mimetypes
from os import path as _path

from ._typing import TargetCategory
from .errors import InvalidFileExtensionError, InvalidMimeTypeError
from . import policy

__all__ = ["guess", "category", "extension"]

_types = mimetypes.MimeTypes()

# media types missing from the tables of some platforms
for _mime, _ext in (
    ("video/x-matroska", ".mkv"),
    ("video/webm", ".webm"),
    ("video/mp4", ".mp4"),
    ("video/mp4", ".m4v"),
    ("video/quicktime", ".mov"),
    ("video/x-msvideo", ".avi"),
    ("video/x-flv", ".flv"),
    ("video/mp2t", ".ts"),
    ("video/ogg", ".ogv"),
    ("video/3gpp", ".3gp"),
    ("audio/mpeg", ".mp3"),
    ("audio/mp4", ".m4a"),
    ("audio/aac", ".aac"),
    ("audio/ogg", ".ogg"),
    ("audio/ogg", ".oga"),
    ("audio/opus", ".opus"),
    ("audio/flac", ".flac"),
    ("audio/wav", ".wav"),
    ("audio/x-aiff", ".aiff"),
    ("audio/webm", ".weba"),
    ("image/apng", ".apng"),
    ("image/webp", ".webp"),
    ("image/avif", ".avif"),
    ("image/bmp", ".bmp"),
    ("image/tiff", ".tif"),
    ("image/tiff", ".tiff"),
):
    _types.add_type(_mime, _ext)


def extension(path: str) -> str:
    """file extension of the path without the dot

    :raises InvalidFileExtensionError: if the path has no extension
    """
    ext = _path.splitext(str(path))[1][1:]
    if not ext:
        raise InvalidFileExtensionError(path)
    return ext


def guess(path: str) -> str:
    """MIME type of a media file from its extension

    :param path: file path
    :return: MIME type, e.g., ``"video/mp4"``
    :raises InvalidFileExtensionError: if the path has no extension
    :raises InvalidMimeTypeError: if the extension is not a known media type
    """

    ext = extension(path)
    mime, _ = _types.guess_type(f"file.{ext}", strict=False)
    if not mime:
        raise InvalidMimeTypeError(ext)
    return mime


def category(mime: str) -> TargetCategory:
    """output container category of a MIME type

    ============  =========================================================
    category      MIME types
    ============  =========================================================
    ``animated``  animated image formats (:py:data:`policy.ANIMATED_IMAGE_TYPES`)
    ``image``     all the other ``image/*`` types
    ``audio``     ``audio/*``
    ``video``     everything else
    ============  =========================================================
    """

    if mime in policy.ANIMATED_IMAGE_TYPES:
        return "animated"
    if mime.startswith("image/"):
        return "image"
    if mime.startswith("audio/"):
        return "audio"
    return "video"
