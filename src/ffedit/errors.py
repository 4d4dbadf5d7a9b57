from __future__ import annotations

import re
from collections.abc import Sequence

__all__ = [
    "FFeditError",
    "MissingStreamError",
    "InvalidOutputPathError",
    "InvalidFileExtensionError",
    "InvalidMimeTypeError",
    "OutputExistsError",
    "MetadataError",
    "FilterOptionError",
    "FFmpegCommandError",
    "UnresolvedInputError",
    "scan_stderr",
]


class FFeditError(Exception):
    pass


class MissingStreamError(FFeditError, ValueError):
    def __init__(self, stream_type: str, filter_name: str):
        super().__init__(f'missing {stream_type} stream for filter "{filter_name}".')
        self.stream_type = stream_type
        self.filter_name = filter_name


class InvalidOutputPathError(FFeditError, ValueError):
    def __init__(self, message: str = "output path is required"):
        super().__init__(f"invalid output path: {message}")


class InvalidFileExtensionError(FFeditError, ValueError):
    def __init__(self, path: str):
        super().__init__(f"output filename and extension are required: {path!r}")
        self.path = path


class InvalidMimeTypeError(FFeditError, ValueError):
    def __init__(self, extension: str):
        super().__init__(f"unrecognized output file extension: {extension!r}")
        self.extension = extension


class OutputExistsError(FFeditError, FileExistsError):
    def __init__(self, path: str):
        super().__init__(
            f"{path} already exists. Set overwrite=True to replace the file."
        )
        self.path = path


class MetadataError(FFeditError):
    pass


class FilterOptionError(FFeditError, ValueError):
    """Raised when a filter or output option object fails validation

    :param name: filter (or option group) name
    :param errors: list of error dicts as reported by pydantic
    """

    def __init__(self, name: str, errors: Sequence[dict] | None = None):
        self.name = name
        self.errors = list(errors or [])
        details = "; ".join(
            f"{'.'.join(str(l) for l in e.get('loc', ())) or name}: {e.get('msg')}"
            for e in self.errors
        )
        super().__init__(
            f'invalid options for "{name}"' + (f": {details}" if details else "")
        )


class UnresolvedInputError(FFeditError, RuntimeError):
    """internal error: a filtergraph pad refers to an input that was never registered"""

    def __init__(self, owner: str):
        super().__init__(
            f"filtergraph references unregistered input {owner!r}. This is a bug."
        )
        self.owner = owner


def scan_stderr(logs: str | Sequence[str] | None) -> str:
    """distill the FFmpeg error message from its log

    :param logs: FFmpeg stderr output as a string or a sequence of lines
    :return: the most relevant error line(s), empty if nothing stood out
    """

    if not logs:
        return ""

    if isinstance(logs, str):
        logs = re.split(r"[\n\r]+", logs.rstrip())

    if not len(logs):
        return ""

    msg0 = logs[-1]
    prev = logs[-2] if len(logs) > 1 else ""
    if msg0 == "Invalid argument":
        msg = prev
        if msg == "Error initializing complex filters." and len(logs) > 2:
            msg = f"{logs[-3]}\n  {msg}"
    elif msg0 in (
        "To ignore this, add a trailing '?' to the map.",
        "Filtering and streamcopy cannot be used together.",
        "FFmpeg cannot edit existing files in-place.",
    ):
        msg = f"{prev}\n  {msg0}"
    elif msg0.startswith(("Error opening input file", "Error opening output file")):
        msg = "\n  ".join(logs[-2:])
    elif msg0 == "Conversion failed!":
        msg = prev
    elif re.match(r".+?: Invalid argument", msg0):
        msg = f"{prev}\n  {msg0}" if prev.startswith("[") else msg0
    else:
        msg = msg0
    return msg


class FFmpegCommandError(FFeditError, RuntimeError):
    """FFmpeg exited with a non-zero status

    :param command: the failed command line
    :param stderr: FFmpeg log captured from its stderr
    :param returncode: FFmpeg exit code
    """

    def __init__(
        self, command: str, stderr: str | None = None, returncode: int | None = None
    ):
        self.command = command
        self.stderr = stderr or ""
        self.returncode = returncode
        self.ffmpeg_msg = scan_stderr(self.stderr)

        if self.ffmpeg_msg:
            msg = f"FFmpeg terminated abnormally with the error:\n\n  {self.ffmpeg_msg}"
        else:
            msg = "FFmpeg failed for unknown reason (no log available)."

        super().__init__(f"{msg}\n\nCommand: {command}")
