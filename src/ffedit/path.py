from __future__ import annotations

from os import path as _path, name as _os_name
from shutil import which
from subprocess import run, DEVNULL, PIPE
import re, shlex
from packaging.version import Version
import logging

logger = logging.getLogger("ffedit")

from ._typing import Callable, NamedTuple, Sequence
from .errors import FFeditError
from . import plugins

__all__ = ["found", "where", "find", "ffmpeg", "ffprobe", "versions", "DEVNULL", "PIPE", "FFmpegNotFound"]


class FFmpegNotFound(FFeditError):
    def __init__(self):
        super().__init__(
            "FFmpeg executables not found. Run `ffedit.set_path()` first or "
            "place FFmpeg executables in auto-detectable path locations."
        )


class Executables(NamedTuple):
    """Located FFmpeg executables"""

    ffmpeg: str
    ffprobe: str
    version: Version


FFMPEG_BIN = None
FFPROBE_BIN = None
FFMPEG_VER = None

_EXE = ".exe" if _os_name == "nt" else ""


def found() -> bool:
    """True if both ffmpeg and ffprobe are located"""
    return bool(FFMPEG_BIN and FFPROBE_BIN)


def where(probe: bool = False) -> str:
    """path of the ffmpeg (or ffprobe) executable

    :param probe: True for ffprobe, defaults to False
    :raises FFmpegNotFound: if the executables are not located yet
    """

    exe = FFPROBE_BIN if probe else FFMPEG_BIN
    if not exe:
        raise FFmpegNotFound()
    return exe


def _locate(ffmpeg_path: str | None, ffprobe_path: str | None) -> tuple[str, str]:
    if ffmpeg_path is None:
        if ffprobe_path is not None:
            raise ValueError("ffprobe path given without ffmpeg path.")
        if which("ffmpeg") and which("ffprobe"):
            return "ffmpeg", "ffprobe"
        res = plugins.get_hook().finder()
        if res is None:
            raise RuntimeError("Failed to auto-detect ffmpeg and ffprobe executable.")
        return res

    if _path.isdir(ffmpeg_path):
        if ffprobe_path is not None:
            raise ValueError("ffprobe path cannot be combined with an FFmpeg directory.")
        ffdir = ffmpeg_path
        ffmpeg_path = _path.join(ffdir, f"ffmpeg{_EXE}")
        ffprobe_path = _path.join(ffdir, f"ffprobe{_EXE}")
    elif ffprobe_path is None:
        raise ValueError(
            "Either specify paths of both ffmpeg and ffprobe or a path to the directory containing both."
        )

    for name, exe in (("ffmpeg", ffmpeg_path), ("ffprobe", ffprobe_path)):
        if not which(exe):
            raise ValueError(f"{name} executable not found at {exe}")
    return ffmpeg_path, ffprobe_path


def _parse_version(ver: str) -> Version:
    # nightly builds report a git hash, e.g., "N-111000-g1234abcd"
    m = re.match(r"\d+(?:\.\d+(?:\.\d+)?)?", ver)
    return Version(m[0]) if m else Version("9999")


def find(ffmpeg_path: str | None = None, ffprobe_path: str | None = None) -> Executables:
    """locate the FFmpeg executables used by ffedit

    :param ffmpeg_path: ffmpeg executable or the directory holding both
                        ffmpeg and ffprobe, defaults to None (auto-detect)
    :param ffprobe_path: ffprobe executable, required if ``ffmpeg_path`` is
                         an executable, defaults to None
    :return: located executables and the FFmpeg version

    Auto-detection tries the ``ffmpeg`` and ``ffprobe`` commands on the system
    PATH first, then the ``finder`` plugin hooks.
    """

    global FFMPEG_BIN, FFPROBE_BIN, FFMPEG_VER

    FFMPEG_BIN, FFPROBE_BIN = _locate(ffmpeg_path, ffprobe_path)
    FFMPEG_VER = _parse_version(versions()["version"])
    logger.debug("using %s (version %s) and %s", FFMPEG_BIN, FFMPEG_VER, FFPROBE_BIN)

    return Executables(FFMPEG_BIN, FFPROBE_BIN, FFMPEG_VER)


def _run(exe: str | None, args: str | Sequence[str], sp_run: Callable | None, **sp_kwargs):
    if isinstance(args, str):
        args = shlex.split(args)
    if exe is None:
        raise FFmpegNotFound()
    logger.debug(shlex.join((exe, *args)))
    try:
        return (sp_run or run)((exe, *args), **sp_kwargs)
    except FileNotFoundError as e:
        raise FFmpegNotFound() from e


def ffmpeg(args: str | Sequence[str], sp_run: Callable | None = None, **sp_kwargs):
    """run ffmpeg

    :param args: arguments without the executable
    :param sp_run: command runner, defaults to :py:func:`subprocess.run`
    :return: the runner's return value
    """
    return _run(FFMPEG_BIN, args, sp_run, **sp_kwargs)


def ffprobe(args: str | Sequence[str], sp_run: Callable | None = None, **sp_kwargs):
    """run ffprobe, see :py:func:`ffmpeg`"""
    return _run(FFPROBE_BIN, args, sp_run, **sp_kwargs)


def versions() -> dict:
    """FFmpeg version and build information

    ==================  ====  =========================================
    key                 type  description
    ==================  ====  =========================================
    'version'           str   FFmpeg version
    'configuration'     list  build configuration options
    'library_versions'  dict  versions of the av libraries
    ==================  ====  =========================================
    """

    lines = ffmpeg(["-version"], stdout=PIPE, universal_newlines=True, encoding="utf-8").stdout.splitlines()

    info = {"version": re.match(r"ffmpeg version (\S+)", lines[0])[1]}
    libs = {}
    for line in lines[1:]:
        if line.startswith("configuration:"):
            info["configuration"] = sorted(re.findall(r"\s--(\S+)", line))
        else:
            m = re.match(r"(lib\w+)\s+(.+?) /", line)
            if m:
                libs[m[1]] = m[2].replace(" ", "")
    if libs:
        info["library_versions"] = libs
    return info
