import os
from subprocess import CompletedProcess

import pytest
from packaging.version import Version

from ffedit import path

from conftest import requires_ffmpeg

version_output = """ffmpeg version 6.1.1 Copyright (c) 2000-2023 the FFmpeg developers
built with gcc 12 (Debian 12.2.0-14)
configuration: --prefix=/usr --enable-gpl --enable-libx264
libavutil      58. 29.100 / 58. 29.100
libavcodec     60. 31.102 / 60. 31.102
"""


@requires_ffmpeg
def test_find():
    ffmpeg_path = path.where()
    ffprobe_path = path.where(True)

    found = path.find(ffmpeg_path, ffprobe_path)
    assert found.ffmpeg == ffmpeg_path and found.ffprobe == ffprobe_path
    assert isinstance(found.version, Version)
    with pytest.raises(Exception):
        path.find("wrong_dir")
    with pytest.raises(Exception):
        path.find("wrong_path", ffprobe_path)
    with pytest.raises(Exception):
        path.find(ffmpeg_path, "wrong_path")

    ffmpeg_dir = os.path.dirname(ffmpeg_path)
    if ffmpeg_dir != "":
        path.find(ffmpeg_dir)


@requires_ffmpeg
def test_where():
    assert path.where() is not None


@requires_ffmpeg
def test_ffmpeg_versions():
    assert "version" in path.versions()


def test_find_argument_errors(tmp_path):
    with pytest.raises(ValueError):
        path.find(ffprobe_path="ffprobe")
    with pytest.raises(ValueError):
        path.find(str(tmp_path), "ffprobe")
    with pytest.raises(ValueError):
        path.find(str(tmp_path))  # directory without the executables


def test_versions(monkeypatch):
    monkeypatch.setattr(
        path, "ffmpeg", lambda args, **kwargs: CompletedProcess(args, 0, version_output, "")
    )
    info = path.versions()
    assert info["version"] == "6.1.1"
    assert info["configuration"] == ["enable-gpl", "enable-libx264", "prefix=/usr"]
    assert info["library_versions"] == {"libavutil": "58.29.100", "libavcodec": "60.31.102"}


def test_parse_version():
    assert path._parse_version("6.1.1") == Version("6.1.1")
    assert path._parse_version("7.0-static") == Version("7.0")
    assert path._parse_version("N-111000-g1234abcd") == Version("9999")


def test_not_found(monkeypatch):
    monkeypatch.setattr(path, "FFMPEG_BIN", None)
    assert not path.found()
    with pytest.raises(path.FFmpegNotFound):
        path.where()
    with pytest.raises(path.FFmpegNotFound):
        path.ffmpeg(["-version"])
