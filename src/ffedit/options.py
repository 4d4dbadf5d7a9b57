"""Filter and output option models

Every filter method of :py:class:`ffedit.editor.MediaEditor` validates its
arguments against one of these models before any filter is queued. A failed
validation raises :py:class:`ffedit.errors.FilterOptionError`.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from .errors import FilterOptionError
from .utils import parse_time_duration

__all__ = [
    "validate",
    "OutputOptions",
    "VolumeOptions",
    "LoudnormOptions",
    "DynaudnormOptions",
    "TrimOptions",
    "FadeOptions",
    "CropOptions",
    "ScaleOptions",
    "RotateOptions",
    "PadOptions",
    "BrightnessOptions",
    "HueOptions",
    "ColorBalanceOptions",
    "ColorMixerOptions",
    "ColorMultiplierOptions",
    "RemoveColorOptions",
    "DeshakeOptions",
    "PanOptions",
    "DrawTextOptions",
    "DrawBoxOptions",
    "OverlayOptions",
    "MixOptions",
    "PITCH_FACTOR",
    "SPEED_FACTOR",
    "BLUR_RADIUS",
    "ALPHA_VALUE",
    "DELAY_SECONDS",
    "FLIP_AXIS",
    "DENOISE_METHOD",
    "COLOR_PRESET",
    "STREAM",
    "CURVES",
    "COLOR_PRESETS",
]

# fmt:off
CURVES = (
    "tri", "qsin", "hsin", "esin", "log", "ipar", "qua", "cub", "squ", "cbr",
    "par", "exp", "iqsin", "ihsin", "dese", "desi", "losi", "sinc", "isinc",
    "quat", "quatr", "qsin2", "hsin2", "nofade",
)

COLOR_PRESETS = (
    "sepia", "golden hour", "purple noir", "grayscale", "moonlight",
    "teal & orange", "vibrant", "desaturated", "negative", "matrix code green",
    "cyberpunk", "vintage film",
)
# fmt:on

Curve = Literal[CURVES]
ColorPreset = Literal[COLOR_PRESETS]
Stream = Literal["audio", "video", "all"]
ScaleFlags = Literal[
    "fast_bilinear",
    "bilinear",
    "bicubic",
    "neighbor",
    "area",
    "gauss",
    "gaussian",
    "sinc",
    "lanczos",
    "spline",
]
Preset = Literal[
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
    "placebo",
]


def Num(ge=None, gt=None, le=None, lt=None):
    """annotated float type with range constraints"""
    return Annotated[float, Field(ge=ge, gt=gt, le=le, lt=lt)]


def Expr(ge=None, gt=None, le=None, lt=None):
    """a constrained number or an FFmpeg expression string"""
    return Union[Num(ge=ge, gt=gt, le=le, lt=lt), str]


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    def given(self) -> dict:
        """fields with a value, in declaration order"""
        return {k: v for k, v in self if v is not None}


def _require_any(model: _Options, names, message: str):
    if all(getattr(model, k) is None for k in names):
        raise ValueError(message)


def _exclusive(model: _Options, a: str, b: str):
    if getattr(model, a) is not None and getattr(model, b) is not None:
        raise ValueError(f"{a} and {b} are mutually exclusive")


def validate(model, data: Any = None, name: Optional[str] = None, **kwargs) -> Any:
    """validate option data against a model

    :param model: option model class or a pydantic TypeAdapter for a scalar option
    :param data: options as a mapping or model instance (or a scalar for a
                 TypeAdapter), defaults to None (all defaults)
    :param name: filter name reported on failure, defaults to the model name
    :param \\**kwargs: options, merged over ``data``
    :return: validated model instance or scalar
    :raises FilterOptionError: if validation fails
    """

    if isinstance(model, TypeAdapter):
        name = name or "value"
        try:
            return model.validate_python(data)
        except ValidationError as e:
            raise FilterOptionError(name, e.errors(include_url=False)) from e

    if isinstance(data, model) and not kwargs:
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)

    try:
        return model.model_validate({**(data or {}), **kwargs})
    except ValidationError as e:
        raise FilterOptionError(name or model.__name__, e.errors(include_url=False)) from e


#### scalar options ####

PITCH_FACTOR = TypeAdapter(Num(ge=0.125, le=8))
SPEED_FACTOR = TypeAdapter(Annotated[Num(ge=-100, le=100), Field(allow_inf_nan=False)])
BLUR_RADIUS = TypeAdapter(Num(ge=0.1, le=50))
ALPHA_VALUE = TypeAdapter(Num(ge=0, le=1))
DELAY_SECONDS = TypeAdapter(Num(gt=0))
FLIP_AXIS = TypeAdapter(Literal["horizontal", "vertical", "both"])
DENOISE_METHOD = TypeAdapter(Literal["hqdn3d", "nlmeans", "atadenoise", "afftdn"])
COLOR_PRESET = TypeAdapter(ColorPreset)
STREAM = TypeAdapter(Optional[Stream])


#### audio filters ####


class VolumeOptions(_Options):
    volume: Union[float, str]
    precision: Optional[Literal["fixed", "float", "double"]] = None
    eval_mode: Optional[Literal["once", "frame"]] = None


class LoudnormOptions(_Options):
    average: Num(ge=-70, le=-5) = -23  # integrated loudness target (I)
    range: Num(ge=1, le=50) = 9  # loudness range target (LRA)
    peak: Num(ge=-9, le=0) = -1  # maximum true peak (TP)
    linear: Optional[bool] = None


class DynaudnormOptions(_Options):
    frame_length: Num(ge=10, le=8000) = 200
    gauss_size: Optional[Annotated[int, Field(ge=3, le=301)]] = None
    peak: Num(ge=0, le=1) = 0.9
    max_gain: Optional[Num(ge=1, le=100)] = None
    rms: Optional[Num(ge=0, le=1)] = None
    compress: Optional[Num(ge=1, le=30)] = None
    threshold: Optional[Num(ge=0, le=1)] = None

    @model_validator(mode="after")
    def _check_gauss_size(self):
        if self.gauss_size is not None and self.gauss_size % 2 == 0:
            raise ValueError("gauss_size must be an odd number")
        return self


class PanOptions(_Options):
    layout: Literal["mono", "stereo", "5.1", "7.1"]
    channels: Annotated[list[Union[float, str]], Field(min_length=1)]


class MixOptions(_Options):
    duration: Literal["longest", "shortest", "first"] = "longest"
    dropout_transition: Optional[Num(ge=0)] = None
    weights: Optional[list[float]] = None
    normalize: Optional[bool] = None


#### two-stream filters ####


class TrimOptions(_Options):
    stream: Optional[Stream] = None
    start: Optional[Expr(ge=0)] = None
    end: Optional[Expr(gt=0)] = None
    duration: Optional[Expr(gt=0)] = None

    @model_validator(mode="after")
    def _check_range(self):
        _require_any(self, ("start", "end", "duration"), "start, end, or duration is required")
        _exclusive(self, "end", "duration")
        if self.start is not None and self.end is not None:
            try:
                start, end = parse_time_duration(self.start), parse_time_duration(self.end)
            except ValueError:
                return self  # expressions are left to FFmpeg
            if end <= start:
                raise ValueError("end must be after start")
        return self


class FadeOptions(_Options):
    type: Literal["in", "out"] = "in"
    duration: Num(ge=0.1)
    start: Num(ge=0) = 0
    curve: Optional[Curve] = None
    color: Optional[str] = None
    stream: Optional[Stream] = None


#### video filters ####


class CropOptions(_Options):
    width: Optional[Expr(gt=10)] = None
    height: Optional[Expr(gt=10)] = None
    x: Optional[Union[float, str]] = None
    y: Optional[Union[float, str]] = None
    aspect_ratio: Optional[Annotated[str, Field(pattern=r"^[1-9]\d*:[1-9]\d*$")]] = None

    @model_validator(mode="after")
    def _check_mode(self):
        if self.aspect_ratio is not None and (
            self.width is not None or self.height is not None
        ):
            raise ValueError("aspect_ratio cannot be combined with width or height")
        return self


class ScaleOptions(_Options):
    width: Optional[Expr(gt=10)] = None
    height: Optional[Expr(gt=10)] = None
    percentage: Optional[Num(ge=10, le=200)] = None
    size: Optional[str] = None  # FFmpeg video size, e.g., "hd720" or "640x480"
    force_aspect_ratio: Optional[Literal["increase", "decrease", "disable"]] = None
    flags: Optional[ScaleFlags] = None

    @model_validator(mode="after")
    def _check_mode(self):
        _require_any(
            self,
            ("width", "height", "percentage", "size"),
            "width, height, percentage, or size is required",
        )
        if self.percentage is not None:
            if self.width is not None or self.height is not None:
                raise ValueError("percentage cannot be combined with width or height")
            if self.force_aspect_ratio is not None:
                raise ValueError("percentage cannot be combined with force_aspect_ratio")
        _exclusive(self, "size", "percentage")
        return self


class RotateOptions(_Options):
    degrees: Optional[Num(ge=-360, le=360)] = None
    expression: Optional[str] = None
    output_width: Optional[Expr(gt=0)] = None
    output_height: Optional[Expr(gt=0)] = None
    empty_area_color: str = "black@0"

    @model_validator(mode="after")
    def _check_angle(self):
        _require_any(self, ("degrees", "expression"), "degrees or expression is required")
        _exclusive(self, "degrees", "expression")
        return self


class PadOptions(_Options):
    width: Expr(gt=0)
    height: Expr(gt=0)
    x: Optional[Expr(ge=0)] = None
    y: Optional[Expr(ge=0)] = None
    color: str = "black"


class BrightnessOptions(_Options):
    brightness: Optional[Expr(ge=-1, le=1)] = None
    contrast: Optional[Expr(ge=-1000, le=1000)] = None
    saturation: Optional[Expr(ge=0, le=3)] = None
    gamma: Optional[Expr(ge=0.1, le=10)] = None

    @model_validator(mode="after")
    def _check_any(self):
        _require_any(
            self,
            type(self).model_fields,
            "at least one of brightness, contrast, saturation or gamma must be provided",
        )
        return self


class HueOptions(_Options):
    degrees: Optional[Num(ge=-360, le=360)] = None
    expression: Optional[str] = None
    saturation: Optional[Expr(ge=-10, le=10)] = None
    brightness: Optional[Expr(ge=-10, le=10)] = None

    @model_validator(mode="after")
    def _check_angle(self):
        _require_any(self, ("degrees", "expression"), "degrees or expression is required")
        _exclusive(self, "degrees", "expression")
        return self


Balance = Optional[Num(ge=-1, le=1)]


class ColorBalanceOptions(_Options):
    red_shadows: Balance = None
    green_shadows: Balance = None
    blue_shadows: Balance = None
    red_midtones: Balance = None
    green_midtones: Balance = None
    blue_midtones: Balance = None
    red_highlights: Balance = None
    green_highlights: Balance = None
    blue_highlights: Balance = None
    preserve_lightness: Optional[bool] = None

    @model_validator(mode="after")
    def _check_any(self):
        _require_any(
            self, type(self).model_fields, "at least one color balance value must be provided"
        )
        return self


Gain = Optional[Num(ge=-2, le=2)]


class ColorMixerOptions(_Options):
    red_in_red: Gain = None
    red_in_green: Gain = None
    red_in_blue: Gain = None
    red_in_alpha: Gain = None
    green_in_red: Gain = None
    green_in_green: Gain = None
    green_in_blue: Gain = None
    green_in_alpha: Gain = None
    blue_in_red: Gain = None
    blue_in_green: Gain = None
    blue_in_blue: Gain = None
    blue_in_alpha: Gain = None
    alpha_in_red: Gain = None
    alpha_in_green: Gain = None
    alpha_in_blue: Gain = None
    alpha_in_alpha: Gain = None
    preserve_color_mode: Optional[
        Literal["none", "lum", "max", "avg", "sum", "nrm", "pwr"]
    ] = None
    preserve_color_amount: Optional[Num(ge=0, le=1)] = None

    @model_validator(mode="after")
    def _check_any(self):
        _require_any(
            self, type(self).model_fields, "at least one color mixer value must be provided"
        )
        return self


Multiplier = Optional[Expr(ge=0, le=10)]


class ColorMultiplierOptions(_Options):
    red: Multiplier = None
    green: Multiplier = None
    blue: Multiplier = None
    alpha: Multiplier = None

    @model_validator(mode="after")
    def _check_any(self):
        _require_any(
            self, type(self).model_fields, "at least one color multiplier must be provided"
        )
        return self


class RemoveColorOptions(_Options):
    red: bool = False
    green: bool = False
    blue: bool = False

    @model_validator(mode="after")
    def _check_any(self):
        if not (self.red or self.green or self.blue):
            raise ValueError("at least one of red, green or blue must be removed")
        return self


class DeshakeOptions(_Options):
    x: Optional[Annotated[int, Field(ge=-1)]] = None
    y: Optional[Annotated[int, Field(ge=-1)]] = None
    width: Optional[Annotated[int, Field(ge=-1)]] = None
    height: Optional[Annotated[int, Field(ge=-1)]] = None
    motion_range_x: Optional[Annotated[int, Field(ge=0, le=64)]] = None
    motion_range_y: Optional[Annotated[int, Field(ge=0, le=64)]] = None
    edge: Optional[Literal["blank", "clamp", "mirror", "original"]] = None
    blocksize: Optional[Annotated[int, Field(ge=4, le=128)]] = None
    contrast: Optional[Annotated[int, Field(ge=1, le=255)]] = None


class DrawTextOptions(_Options):
    text: str
    text_align: Optional[str] = None
    line_spacing: Optional[Num(ge=0)] = None
    font_file: Optional[str] = None
    font_size: Optional[Annotated[int, Field(gt=0)]] = None
    font_color: Optional[str] = None
    x: Optional[Union[float, str]] = None
    y: Optional[Union[float, str]] = None
    border_width: Optional[Num(ge=0)] = None
    border_color: Optional[str] = None
    shadow_x: Optional[int] = None
    shadow_y: Optional[int] = None
    shadow_color: Optional[str] = None
    box: Optional[bool] = None
    box_color: Optional[str] = None
    box_border_width: Optional[list[float]] = None
    enable: Optional[Union[bool, str]] = None


class DrawBoxOptions(_Options):
    x: Union[float, str]
    y: Union[float, str]
    width: Union[float, str]
    height: Union[float, str]
    fill_color: Optional[str] = None
    border_color: Optional[str] = None
    thickness: Optional[Num(gt=0)] = None
    enable: Optional[Union[bool, str]] = None

    @model_validator(mode="after")
    def _check_any(self):
        _require_any(
            self,
            ("fill_color", "border_color", "thickness"),
            "fill_color, border_color, or thickness is required",
        )
        return self


class OverlayOptions(_Options):
    x: Union[float, str] = 0
    y: Union[float, str] = 0
    enable: Optional[Union[bool, str]] = None


#### output ####


class OutputOptions(_Options):
    """Output encoding options, all optional

    ==================  =======  ==============================================
    option              FFmpeg   description
    ==================  =======  ==============================================
    audio_codec         c:a      audio encoder, default: stream copy or FFmpeg default
    video_codec         c:v      video encoder, default: stream copy or FFmpeg default
    audio_bitrate       b:a      audio bitrate, e.g., "96k"
    video_bitrate       b:v      video bitrate, e.g., "1M"
    channels            ac       number of audio channels
    fps                 r        output frame rate
    crf                 crf      constant rate factor
    preset              preset   encoder preset
    pixel_format        pix_fmt  pixel format
    duration            t        output duration in seconds
    shortest            shortest stop at the end of the shortest stream (default)
    overwrite           y        replace an existing output file (default)
    audio_none          an       exclude audio from the output
    video_none          vn       exclude video from the output
    ==================  =======  ==============================================
    """

    audio_codec: Optional[str] = None
    video_codec: Optional[str] = None
    audio_bitrate: Optional[Union[Annotated[int, Field(gt=0)], str]] = None
    video_bitrate: Optional[Union[Annotated[int, Field(gt=0)], str]] = None
    channels: Optional[Annotated[int, Field(gt=0, le=8)]] = None
    fps: Optional[Union[Num(gt=0), str]] = None
    crf: Optional[Num(ge=0, le=63)] = None
    preset: Optional[Preset] = None
    pixel_format: Optional[str] = None
    duration: Optional[Num(gt=0)] = None
    shortest: bool = True
    overwrite: bool = True
    audio_none: bool = False
    video_none: bool = False

    @model_validator(mode="after")
    def _check_streams(self):
        if self.audio_none and self.video_none:
            raise ValueError("audio_none and video_none cannot both be set")
        return self
