import pytest

import ffedit
from ffedit import probe
from ffedit.errors import MetadataError

vid_url = "tests/assets/testvideo-1m.mp4"
img_url = "tests/assets/ffmpeg-logo.png"
img2_url = "tests/assets/watermark.png"
aud_url = "tests/assets/testaudio-1m.mp3"
silent_url = "tests/assets/testsilent-10s.mp4"

# canned ffprobe summaries, so the graph core runs without FFmpeg
SUMMARIES = {
    vid_url: {
        "has_audio": True,
        "has_video": True,
        "duration": 60.0,
        "size": 1234567,
        "bit_rate": 164608,
        "width": 1280,
        "height": 720,
        "aspect_ratio": "16:9",
        "frame_count": 1800,
        "frame_rate": 30.0,
        "audio_channels": 2,
        "audio_sample_rate": 48000,
        "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
        "tags": {},
    },
    img_url: {
        "has_audio": False,
        "has_video": True,
        "duration": None,
        "width": 640,
        "height": 480,
        "aspect_ratio": None,
        "frame_count": None,
        "frame_rate": 25.0,
        "audio_channels": None,
        "audio_sample_rate": None,
        "format_name": "png_pipe",
        "tags": {},
    },
    img2_url: {
        "has_audio": False,
        "has_video": True,
        "duration": None,
        "width": 200,
        "height": 100,
        "frame_count": None,
        "format_name": "png_pipe",
        "tags": {},
    },
    aud_url: {
        "has_audio": True,
        "has_video": False,
        "duration": 60.0,
        "bit_rate": 128000,
        "audio_channels": 2,
        "audio_sample_rate": 44100,
        "format_name": "mp3",
        "tags": {"title": "test"},
    },
    silent_url: {
        "has_audio": False,
        "has_video": True,
        "duration": 10.0,
        "width": 320,
        "height": 240,
        "frame_count": 250,
        "frame_rate": 25.0,
        "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
        "tags": {},
    },
}


def _fake_summary(url, cache_output=True):
    try:
        return dict(SUMMARIES[url])
    except KeyError:
        raise MetadataError(f"{url}: No such file or directory") from None


@pytest.fixture(autouse=True)
def fake_probe(monkeypatch):
    monkeypatch.setattr(probe, "summary", _fake_summary)


requires_ffmpeg = pytest.mark.skipif(
    not ffedit.path.found(), reason="FFmpeg executables not found"
)
