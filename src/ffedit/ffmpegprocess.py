r"""FFmpeg subprocess execution

run(...): Runs a FFmpeg command to completion with its log captured. The output
          file is written under a temporary name in the destination directory
          and moved into place only if FFmpeg succeeds.
"""

from __future__ import annotations

from copy import deepcopy
from os import path, replace, remove
import subprocess as sp
import tempfile
import logging

logger = logging.getLogger("ffedit")

from ._typing import Callable, FFmpegArgs
from .errors import FFmpegCommandError, OutputExistsError
from .path import ffmpeg
from .utils.parser import compose, FLAG

__all__ = ["run", "exec"]


def exec(
    ffmpeg_args: FFmpegArgs,
    hide_banner: bool = True,
    sp_run: Callable = sp.run,
    **sp_kwargs,
) -> sp.CompletedProcess:
    """run ffmpeg command as is

    :param ffmpeg_args: FFmpeg argument options
    :param hide_banner: False to output ffmpeg banner in stderr, defaults to True
    :param sp_run: function to run FFmpeg as a subprocess, defaults to subprocess.run
    :param \\**sp_kwargs: additional keyword arguments for sp_run, optional
    :return: completed process with its stderr captured as text

    ``ffmpeg_args`` is not modified.
    """

    ffmpeg_args = deepcopy(ffmpeg_args)
    gopts = ffmpeg_args.get("global_options", None)
    if gopts is None:
        gopts = ffmpeg_args["global_options"] = {}

    # disable user-interaction
    gopts["nostdin"] = FLAG

    if hide_banner:
        gopts["hide_banner"] = FLAG

    return ffmpeg(
        compose(ffmpeg_args),
        sp_run=sp_run,
        stdin=sp.DEVNULL,
        stdout=sp.DEVNULL,
        stderr=sp.PIPE,
        universal_newlines=True,
        **sp_kwargs,
    )


def run(
    ffmpeg_args: FFmpegArgs,
    overwrite: bool | None = None,
    sp_run: Callable = sp.run,
    **sp_kwargs,
) -> sp.CompletedProcess:
    """run ffmpeg command and move its output into place

    :param ffmpeg_args: FFmpeg argument options with exactly one output file
    :param overwrite: True to replace an existing output file, defaults to None
                      to follow the ``y`` global flag in ``ffmpeg_args``
    :param sp_run: function to run FFmpeg as a subprocess, defaults to subprocess.run
    :param \\**sp_kwargs: additional keyword arguments for sp_run, optional
    :raises OutputExistsError: if the output file exists and overwrite is not allowed
    :raises FFmpegCommandError: if FFmpeg exits with an error
    :return: completed process

    FFmpeg writes to a temporary file (with the same extension) next to the
    destination. The temporary file is removed if FFmpeg fails.
    """

    (dst, outopts), *others = ffmpeg_args["outputs"]
    if others:
        raise ValueError("run() supports exactly one output file")

    gopts = ffmpeg_args.get("global_options", None) or {}
    if overwrite is None:
        overwrite = "y" in gopts
    if not overwrite and path.exists(dst):
        raise OutputExistsError(dst)

    dirname, basename = path.split(path.abspath(dst))
    with tempfile.NamedTemporaryFile(
        dir=dirname, prefix=f".{basename}.", suffix=path.splitext(dst)[1], delete=False
    ) as f:
        tmp = f.name

    args = deepcopy(ffmpeg_args)
    args["global_options"] = {
        **{k: v for k, v in gopts.items() if k not in ("y", "n")},
        "y": FLAG,
    }
    args["outputs"] = [(tmp, outopts)]

    try:
        ret = exec(args, sp_run=sp_run, **sp_kwargs)
        if ret.returncode:
            raise FFmpegCommandError(
                compose(ffmpeg_args, command="ffmpeg", shell_command=True),
                ret.stderr,
                ret.returncode,
            )
        replace(tmp, dst)
    except BaseException:
        if path.exists(tmp):
            remove(tmp)
        raise

    logger.debug("wrote %s", dst)
    return ret
