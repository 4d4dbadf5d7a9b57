from __future__ import annotations

import shlex

from .._typing import FFmpegArgs, FFmpegOptionDict

__all__ = ["compose", "FLAG"]

FLAG = None


def _opts2args(opts: FFmpegOptionDict | None) -> list[str]:
    args = []
    for key, val in (opts or {}).items():
        if isinstance(val, list):
            # repeated option, e.g., one -map per output stream
            for v in val:
                args.extend((f"-{key}", str(v)))
        else:
            args.append(f"-{key}")
            if val is not FLAG:
                args.append(str(val))
    return args


def compose(args: FFmpegArgs, command: str = "", shell_command: bool = False) -> list[str] | str:
    """compose ffmpeg subprocess arguments from an argument dict

    :param args: FFmpeg argument dict
    :param command: ffmpeg command, defaults to ""
    :param shell_command: True to output shell command ready string, defaults to False
    :returns: list of arguments (missing the leading 'ffmpeg' command if `command`
              is not given) or shell command string if `shell_command` is True

    Options are emitted in their dict order. Values are converted with `str()`,
    a list value repeats the option once per element, and a `FLAG` (None)
    value outputs the option name alone.
    """

    argv = [command] if command else []
    argv.extend(_opts2args(args.get("global_options", None)))
    for url, opts in args.get("inputs", None) or ():
        argv.extend((*_opts2args(opts), "-i", str(url)))
    for url, opts in args.get("outputs", None) or ():
        argv.extend((*_opts2args(opts), str(url)))

    return shlex.join(argv) if shell_command else argv
