import pytest

from ffedit import options as opts
from ffedit.errors import FilterOptionError


def test_validate_model():
    o = opts.validate(opts.LoudnormOptions, {"average": -16}, peak=-2)
    assert (o.average, o.range, o.peak) == (-16, 9, -2)

    # validated instance passes through
    assert opts.validate(opts.LoudnormOptions, o) is o

    # kwargs override a given instance
    o2 = opts.validate(opts.LoudnormOptions, o, range=7)
    assert (o2.average, o2.range, o2.peak) == (-16, 7, -2)


def test_validate_error():
    with pytest.raises(FilterOptionError) as e:
        opts.validate(opts.LoudnormOptions, {"average": 0}, name="loudnorm")
    assert e.value.name == "loudnorm"
    assert e.value.errors[0]["loc"] == ("average",)
    assert "loudnorm" in str(e.value)
    assert isinstance(e.value, ValueError)

    with pytest.raises(FilterOptionError):
        opts.validate(opts.VolumeOptions, {"volume": 1, "bogus": 2})


@pytest.mark.parametrize(
    "adapter, value",
    [
        (opts.PITCH_FACTOR, 0.1),
        (opts.PITCH_FACTOR, 9),
        (opts.BLUR_RADIUS, 0),
        (opts.ALPHA_VALUE, 1.5),
        (opts.DELAY_SECONDS, 0),
        (opts.FLIP_AXIS, "diagonal"),
        (opts.DENOISE_METHOD, "median"),
        (opts.SPEED_FACTOR, float("nan")),
    ],
)
def test_scalar_out_of_range(adapter, value):
    with pytest.raises(FilterOptionError):
        opts.validate(adapter, value, "scalar")


def test_trim_rules():
    assert opts.TrimOptions(start="00:01.5").start == "00:01.5"
    with pytest.raises(FilterOptionError):
        opts.validate(opts.TrimOptions, {})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.TrimOptions, {"start": 5, "end": 2})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.TrimOptions, {"start": "00:10", "end": "00:05"})
    # expressions left to FFmpeg
    opts.validate(opts.TrimOptions, {"start": "t0", "end": "t1"})


def test_exclusive_fields():
    with pytest.raises(FilterOptionError):
        opts.validate(opts.CropOptions, {"width": 100, "aspect_ratio": "1:1"})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.CropOptions, {"aspect_ratio": "0:1"})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.ScaleOptions, {"percentage": 50, "width": 100})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.RotateOptions, {"degrees": 90, "expression": "PI/2"})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.HueOptions, {})


def test_at_least_one():
    for model in (
        opts.BrightnessOptions,
        opts.ColorBalanceOptions,
        opts.ColorMixerOptions,
        opts.ColorMultiplierOptions,
        opts.RemoveColorOptions,
        opts.ScaleOptions,
    ):
        with pytest.raises(FilterOptionError):
            opts.validate(model, {})

    with pytest.raises(FilterOptionError):
        opts.validate(opts.DrawBoxOptions, {"x": 0, "y": 0, "width": 10, "height": 10})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.DynaudnormOptions, {"gauss_size": 30})


def test_output_options():
    o = opts.OutputOptions()
    assert o.shortest and o.overwrite
    assert not (o.audio_none or o.video_none)
    assert opts.OutputOptions(audio_bitrate=128000).audio_bitrate == 128000

    with pytest.raises(FilterOptionError):
        opts.validate(opts.OutputOptions, {"audio_none": True, "video_none": True})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.OutputOptions, {"channels": 9})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.OutputOptions, {"preset": "turbo"})
    with pytest.raises(FilterOptionError):
        opts.validate(opts.OutputOptions, {"duration": 0})

    # models are frozen
    with pytest.raises(Exception):
        o.crf = 20
