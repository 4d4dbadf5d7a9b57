import pytest

import ffedit
from ffedit import editor, policy
from ffedit.errors import (
    FilterOptionError,
    InvalidFileExtensionError,
    InvalidMimeTypeError,
    InvalidOutputPathError,
    MetadataError,
    MissingStreamError,
)
from ffedit.filtergraph import InputPad, PadTag
from ffedit.utils.parser import FLAG

from conftest import vid_url, img_url, img2_url, aud_url, silent_url


def test_detect_type():
    assert ffedit.MediaEditor(vid_url).type == "video"
    assert ffedit.MediaEditor(img_url).type == "image"
    assert ffedit.MediaEditor(aud_url).type == "audio"
    assert ffedit.AudioEditor(vid_url).type == "audio"

    assert editor.detect_type({"has_audio": False, "has_video": True, "frame_count": 1, "duration": 0.04}) == "image"
    assert editor.detect_type({"has_audio": False, "has_video": True, "duration": 3.0}) == "video"
    with pytest.raises(MetadataError):
        editor.detect_type({"has_audio": False, "has_video": False})
    with pytest.raises(MetadataError):
        ffedit.MediaEditor("tests/assets/missing.mp4")


def test_path_components():
    ed = ffedit.MediaEditor(vid_url.split("/"))
    assert ed.path == vid_url
    assert ed.metadata["width"] == 1280


def test_volume_crop_to_mp4():
    ed = ffedit.VideoEditor(vid_url).volume(0.5).crop(width=640, height=360)

    fragments, aout, vout = ed.state
    owner = ed.owner
    assert len(fragments) == 2
    assert fragments[0].inputs == (InputPad(owner, "a"),)
    assert fragments[0].expression == "volume=0.5"
    assert fragments[0].output == aout == PadTag(owner, 0, "a")
    assert fragments[1].inputs == (InputPad(owner, "v"),)
    assert fragments[1].expression == "crop=w=640:h=360"
    assert fragments[1].output == vout == PadTag(owner, 1, "v")

    assert ed.command("out.mp4") == [
        "ffmpeg",
        "-y",
        "-i",
        vid_url,
        "-filter_complex",
        "[0:a]volume=0.5[0_0:a];[0:v]crop=w=640:h=360[0_1:v]",
        "-map",
        "[0_0:a]",
        "-map",
        "[0_1:v]",
        "-pix_fmt",
        "yuv420p",
        "-shortest",
        "out.mp4",
    ]


def test_two_images_to_gif():
    ed = ffedit.ImageEditor(img_url).overlay(img2_url, x=10, y=10)
    args = ed.args("anim.gif")

    assert args["inputs"] == [(img_url, {"loop": 1}), (img2_url, {"loop": 1})]
    (url, opts), = args["outputs"]
    assert url == "anim.gif"
    assert opts == {
        "filter_complex": "[0:v][1:v]overlay=x=10:y=10[0_0:v]",
        "map": ["[0_0:v]"],
        "loop": 0,
        "t": str(policy.DEFAULT_IMAGE_DURATION),
        "shortest": FLAG,
    }


def test_default_duration_override():
    ed = ffedit.ImageEditor(img_url)
    assert ed.args("o.mp4")["outputs"][0][1]["t"] == "5"
    assert ed.args("o.mp4", duration=2)["outputs"][0][1]["t"] == "2"
    assert "t" not in ffedit.ImageEditor(img_url).trim(duration=3).args("o.mp4")["outputs"][0][1]
    assert "t" not in ffedit.VideoEditor(vid_url).args("o.mp4")["outputs"][0][1]


def test_default_duration_ignores_filter_text():
    # the word trim inside option values is not a trim filter
    opts = ffedit.ImageEditor(img_url).draw_text("trim").args("o.mp4")["outputs"][0][1]
    assert opts["filter_complex"] == "[0:v]drawtext=text=trim[0_0:v]"
    assert opts["t"] == "5"

    ed = ffedit.ImageEditor(img_url).draw_text("a, trim=2").fade(1, stream="video")
    assert ed.args("o.mp4")["outputs"][0][1]["t"] == "5"

    ed = ffedit.ImageEditor(img_url).draw_text("title").trim(duration=2)
    assert "t" not in ed.args("o.mp4")["outputs"][0][1]


def test_chaining_and_idempotent_flush():
    ed = ffedit.MediaEditor(vid_url).grayscale().blur()
    first = ed.command_line("o.mp4")
    assert ed.command_line("o.mp4") == first
    assert "[0:v]format=gray,gblur=sigma=3[0_0:v]" in first

    # later filters chain from the previous output
    ed.flip("vertical")
    fragments, _, vout = ed.state
    assert fragments[-1].inputs == (PadTag(ed.owner, 0, "v"),)
    assert fragments[-1].expression == "vflip"
    assert vout == PadTag(ed.owner, 1, "v")


def test_unique_tags():
    ed = ffedit.MediaEditor(vid_url)
    for i in range(5):
        ed.volume(1 + i / 10)
        ed.state
        ed.hue(degrees=10 * i)
        ed.state
    fragments, _, _ = ed.state
    outputs = [f.output for f in fragments]
    assert len(outputs) == 10
    assert len(set(outputs)) == len(outputs)


def test_missing_stream():
    with pytest.raises(MissingStreamError) as e:
        ffedit.MediaEditor(silent_url).volume(2)
    assert e.value.stream_type == "audio" and e.value.filter_name == "volume"

    with pytest.raises(MissingStreamError):
        ffedit.AudioEditor(aud_url).crop(width=100, height=100)
    with pytest.raises(MissingStreamError):
        ffedit.MediaEditor(aud_url).denoise("nlmeans")
    with pytest.raises(MissingStreamError):
        ffedit.MediaEditor(silent_url).trim(start=1, stream="audio")
    with pytest.raises(MissingStreamError):
        ffedit.MediaEditor(aud_url).overlay(img_url)
    with pytest.raises(MissingStreamError):
        ffedit.MediaEditor(vid_url).mix(img_url)


def test_two_stream_filters():
    fragments, aout, vout = ffedit.MediaEditor(vid_url).trim(start=1, end=3).state
    assert [f.expression for f in fragments] == [
        "atrim=start=1:end=3,asetpts=PTS-STARTPTS",
        "trim=start=1:end=3,setpts=PTS-STARTPTS",
    ]

    fragments, aout, vout = ffedit.MediaEditor(vid_url).fade(2, type="out", start=8, stream="video").state
    assert aout is None
    assert fragments[0].expression == "format=yuva420p,fade=t=out:st=8:d=2:alpha=1"

    # silent video: audio half is skipped
    fragments, aout, vout = ffedit.MediaEditor(silent_url).reverse().state
    assert aout is None and fragments[0].expression == "reverse"


def test_speed():
    ed = ffedit.MediaEditor(vid_url).speed(1)
    assert ed.state.fragments == []
    ed.speed(-1)
    assert [f.expression for f in ed.state.fragments] == ["areverse", "reverse"]

    fragments, _, _ = ffedit.MediaEditor(vid_url).speed(4).state
    assert [f.expression for f in fragments] == ["atempo=2,atempo=2", "setpts=PTS/4"]

    with pytest.raises(FilterOptionError):
        ffedit.MediaEditor(vid_url).speed(0)
    with pytest.raises(FilterOptionError):
        ffedit.MediaEditor(vid_url).speed(101)


def test_pitch_uses_sample_rate():
    fragments, _, _ = ffedit.AudioEditor(aud_url).pitch(2).state
    assert fragments[0].expression == "asetrate=44100*2,aresample=44100,atempo=0.5"


def test_crop_aspect_ratio_uses_source_size():
    fragments, _, _ = ffedit.VideoEditor(vid_url).crop(aspect_ratio="1:1").state
    assert fragments[0].expression == "crop=w=ih*1:h=ih"


def test_mix():
    ed = ffedit.VideoEditor(vid_url).mix(aud_url, duration="first")
    args = ed.args("o.mp4")
    assert [url for url, _ in args["inputs"]] == [vid_url, aud_url]
    opts = args["outputs"][0][1]
    assert opts["filter_complex"] == "[0:a][1:a]amix=inputs=2:duration=first[0_0:a]"
    assert opts["map"] == ["[0_0:a]", "0:v?"]
    assert opts["c:v"] == "copy"


def test_mute_blind():
    opts = ffedit.VideoEditor(vid_url).mute().args("o.mp4")["outputs"][0][1]
    assert opts["map"] == ["0:v?"] and opts["an"] is FLAG

    opts = ffedit.VideoEditor(vid_url).blind().args("o.m4a")["outputs"][0][1]
    assert opts["map"] == ["0:a?"] and opts["vn"] is FLAG

    with pytest.raises(FilterOptionError):
        ffedit.VideoEditor(vid_url).mute().blind().args("o.mp4")


def test_excluded_filtered_stream_is_terminated():
    opts = ffedit.VideoEditor(vid_url).volume(0.5).mute().args("o.mp4")["outputs"][0][1]
    assert opts["filter_complex"] == "[0:a]volume=0.5[0_0:a];[0_0:a]anullsink"
    assert opts["map"] == ["0:v?"] and opts["an"] is FLAG

    ed = ffedit.VideoEditor(vid_url).crop(width=640, height=360).blind()
    opts = ed.args("o.m4a")["outputs"][0][1]
    assert opts["filter_complex"] == "[0:v]crop=w=640:h=360[0_0:v];[0_0:v]nullsink"
    assert opts["map"] == ["0:a?"] and opts["vn"] is FLAG

    # the audio container drops a filtered video stream the same way
    opts = ffedit.VideoEditor(vid_url).grayscale().args("o.mp3")["outputs"][0][1]
    assert opts["filter_complex"] == "[0:v]format=gray[0_0:v];[0_0:v]nullsink"
    assert opts["map"] == ["0:a?"]


def test_output_path_errors():
    ed = ffedit.VideoEditor(vid_url)
    with pytest.raises(InvalidOutputPathError):
        ed.args("")
    with pytest.raises(InvalidFileExtensionError):
        ed.args("out/video")
    with pytest.raises(InvalidMimeTypeError):
        ed.args("out.notamediaext")


def test_option_errors():
    ed = ffedit.VideoEditor(vid_url)
    with pytest.raises(FilterOptionError):
        ed.crop(width=5)
    with pytest.raises(FilterOptionError):
        ed.trim(end=2, duration=3)
    with pytest.raises(FilterOptionError):
        ed.args("o.mp4", crf=100)
    with pytest.raises(FilterOptionError):
        ed.color_preset("bogus")
    # nothing was queued by the failed calls
    assert ed.state.fragments == []
