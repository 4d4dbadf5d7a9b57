import os
from subprocess import CompletedProcess

import pytest

import ffedit
from ffedit import ffmpegprocess, path
from ffedit.errors import FFmpegCommandError, OutputExistsError
from ffedit.utils.parser import FLAG

from conftest import vid_url, requires_ffmpeg


def fake_run(returncode=0, stderr=""):
    calls = []

    def sp_run(args, **kwargs):
        calls.append(list(args))
        if not returncode:
            with open(args[-1], "wb") as f:
                f.write(b"media")
        return CompletedProcess(args, returncode, None, stderr)

    return sp_run, calls


@pytest.fixture(autouse=True)
def ffmpeg_bin(monkeypatch):
    if not path.found():
        monkeypatch.setattr(path, "FFMPEG_BIN", "ffmpeg")


def test_run_moves_output(tmp_path):
    dst = str(tmp_path / "out.mp4")
    args = {"inputs": [("in.mp4", None)], "outputs": [(dst, {"c": "copy"})], "global_options": {}}
    sp_run, calls = fake_run()

    ffmpegprocess.run(args, sp_run=sp_run)

    argv = calls[0]
    assert set(argv[1:4]) == {"-y", "-nostdin", "-hide_banner"}
    tmp = argv[-1]
    assert tmp != dst and tmp.endswith(".mp4")
    assert os.path.dirname(tmp) == str(tmp_path)
    assert not os.path.exists(tmp)
    with open(dst, "rb") as f:
        assert f.read() == b"media"

    # caller's args are left alone
    assert args["global_options"] == {}
    assert args["outputs"][0][0] == dst


def test_run_failure_cleans_up(tmp_path):
    dst = str(tmp_path / "out.mp4")
    args = {"inputs": [("in.mp4", None)], "outputs": [(dst, {})], "global_options": {"y": FLAG}}
    sp_run, calls = fake_run(1, "in.mp4: No such file or directory\n")

    with pytest.raises(FFmpegCommandError) as e:
        ffmpegprocess.run(args, sp_run=sp_run)
    assert e.value.returncode == 1
    assert e.value.ffmpeg_msg == "in.mp4: No such file or directory"
    assert dst in e.value.command
    assert os.listdir(tmp_path) == []


def test_run_no_overwrite(tmp_path):
    dst = tmp_path / "out.mp4"
    dst.write_bytes(b"old")
    args = {"inputs": [("in.mp4", None)], "outputs": [(str(dst), {})], "global_options": {}}
    sp_run, calls = fake_run()

    with pytest.raises(OutputExistsError):
        ffmpegprocess.run(args, sp_run=sp_run)
    assert not calls

    ffmpegprocess.run(args, overwrite=True, sp_run=sp_run)
    assert dst.read_bytes() == b"media"


def test_editor_run_creates_directory(tmp_path, monkeypatch):
    fake, calls = fake_run()
    monkeypatch.setattr(
        ffmpegprocess, "ffmpeg", lambda args, sp_run=None, **kwargs: fake(args, **kwargs)
    )

    dst = tmp_path / "nested" / "dir" / "out.mp4"
    cmd = ffedit.VideoEditor(vid_url).volume(2).run(str(dst))
    assert cmd.startswith("ffmpeg -y -i")
    assert cmd.endswith(str(dst))
    assert dst.exists()


@requires_ffmpeg
def test_run_ffmpeg(tmp_path):
    dst = str(tmp_path / "tone.wav")
    args = {
        "inputs": [("sine=frequency=440:duration=0.1", {"f": "lavfi"})],
        "outputs": [(dst, None)],
        "global_options": {"y": FLAG},
    }
    ffmpegprocess.run(args)
    assert os.path.getsize(dst) > 0
