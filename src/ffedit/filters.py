"""FFmpeg filter expression formatters

Each function takes validated options (see :py:mod:`ffedit.options`) and
returns a pair of filterchain expressions ``(audio, video)``. ``None`` marks a
stream the filter does not touch.
"""

from __future__ import annotations

import math, re
from numbers import Number
from typing import Optional, Tuple

from . import options as opts
from .utils import format_number, escape_filter_value

FilterPair = Tuple[Optional[str], Optional[str]]

_re_bare_color = re.compile(r"[\w@.]+$")


def _v(value) -> str:
    """format an option value: numbers and bools as FFmpeg reads them"""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, Number):
        return format_number(value)
    return str(value)


def _quoted(value) -> str:
    """numbers as is, expressions quoted"""
    return _v(value) if isinstance(value, Number) else f"'{value}'"


def _color(value: str) -> str:
    return value if _re_bare_color.match(value) else f"'{value}'"


def _join(name: str, params: list[str], sep=":") -> str:
    return f"{name}={sep.join(params)}" if params else name


def _atempo_chain(factor: float) -> str:
    # atempo accepts [0.5, 2] per instance on old FFmpeg versions
    parts = []
    while factor > 2:
        parts.append("atempo=2")
        factor /= 2
    while factor < 0.5:
        parts.append("atempo=0.5")
        factor *= 2
    parts.append(f"atempo={format_number(round(factor, 6))}")
    return ",".join(parts)


#### audio ####


def volume(o: opts.VolumeOptions) -> FilterPair:
    params = [_v(o.volume)]
    if o.precision is not None:
        params.append(f"precision={o.precision}")
    if o.eval_mode is not None:
        params.append(f"eval={o.eval_mode}")
    return _join("volume", params), None


def loudnorm(o: opts.LoudnormOptions) -> FilterPair:
    expr = f"loudnorm=I={_v(o.average)}:LRA={_v(o.range)}:TP={_v(o.peak)}"
    if o.linear is not None:
        expr += f":linear={str(o.linear).lower()}"
    return expr, None


def dynaudnorm(o: opts.DynaudnormOptions) -> FilterPair:
    params = [
        f"{k}={_v(v)}"
        for k, v in (
            ("f", o.frame_length),
            ("g", o.gauss_size),
            ("p", o.peak),
            ("m", o.max_gain),
            ("r", o.rms),
            ("s", o.compress),
            ("t", o.threshold),
        )
        if v is not None
    ]
    return _join("dynaudnorm", params), None


def pitch(factor: float, sample_rate: int) -> FilterPair:
    """shift pitch by resampling then restoring the tempo"""
    sr = format_number(sample_rate)
    return (
        f"asetrate={sr}*{format_number(factor)},aresample={sr},{_atempo_chain(1 / factor)}",
        None,
    )


def pan(o: opts.PanOptions) -> FilterPair:
    nch = {"mono": 1, "stereo": 2, "5.1": 6, "7.1": 8}[o.layout]
    expr = f"pan={o.layout}"
    for i, ch in enumerate(o.channels[:nch]):
        expr += f"|c{i}='{_v(ch)}*c{i}'" if isinstance(ch, Number) else f"|c{i}='{ch}'"
    return expr, None


def amix(ninputs: int, o: opts.MixOptions) -> FilterPair:
    params = [f"inputs={ninputs}", f"duration={o.duration}"]
    if o.dropout_transition is not None:
        params.append(f"dropout_transition={_v(o.dropout_transition)}")
    if o.weights:
        params.append(f"weights='{' '.join(_v(w) for w in o.weights)}'")
    if o.normalize is not None:
        params.append(f"normalize={_v(o.normalize)}")
    return _join("amix", params), None


#### audio & video ####


def trim(o: opts.TrimOptions) -> FilterPair:
    params = ":".join(
        f"{k}={_v(v)}"
        for k, v in (("start", o.start), ("end", o.end), ("duration", o.duration))
        if v is not None
    )
    return f"atrim={params},asetpts=PTS-STARTPTS", f"trim={params},setpts=PTS-STARTPTS"


def fade(o: opts.FadeOptions) -> FilterPair:
    timing = f"t={o.type}:st={_v(o.start)}:d={_v(o.duration)}"
    audio = f"afade={timing}" + (f":curve={o.curve}" if o.curve else "")
    video = f"format=yuva420p,fade={timing}" + (
        f":c={o.color}" if o.color is not None else ":alpha=1"
    )
    return audio, video


def reverse() -> FilterPair:
    return "areverse", "reverse"


def speed(factor: float) -> FilterPair:
    """change playback speed, ``factor`` must be positive"""
    return _atempo_chain(factor), f"setpts=PTS/{format_number(factor)}"


def delay(seconds: float) -> FilterPair:
    s = format_number(seconds)
    return f"adelay=delays={s}s:all=1", f"tpad=start_duration={s}:color=0x00000000"


def denoise(method: str) -> FilterPair:
    return {
        "hqdn3d": (None, "hqdn3d=4:3:6:4.5"),
        "atadenoise": (None, "atadenoise=0.5"),
        "nlmeans": (None, "nlmeans=s=7:p=9:pc=5"),
        "afftdn": ("afftdn=nt=w:tn=1", None),
    }[method]


#### video ####


def crop(o: opts.CropOptions, width: int | None = None, height: int | None = None) -> FilterPair:
    """crop the frame

    :param o: crop options
    :param width: source frame width, used with ``o.aspect_ratio``
    :param height: source frame height, used with ``o.aspect_ratio``
    """

    coords = "".join(f":{k}={_v(v)}" for k, v in (("x", o.x), ("y", o.y)) if v is not None)

    if not o.aspect_ratio:
        w = "iw" if o.width is None else _v(o.width)
        h = "ih" if o.height is None else _v(o.height)
        return None, f"crop=w={w}:h={h}{coords}"

    aw, ah = (int(v) for v in o.aspect_ratio.split(":"))
    ratio = aw / ah
    r, inv = format_number(ratio), format_number(1 / ratio)

    if not (width and height):
        if ratio >= 1:
            return None, f"crop=w=min(ih\\,iw)*{r}:h=min(ih\\,iw){coords}"
        return None, f"crop=w=min(ih\\,iw):h=min(ih\\,iw)*{inv}{coords}"

    if width / height >= ratio:
        return None, f"crop=w=ih*{r}:h=ih{coords}"
    return None, f"crop=w=iw:h=iw*{inv}{coords}"


def scale(o: opts.ScaleOptions) -> FilterPair:
    def even(v):
        return str(math.ceil(v / 2) * 2) if isinstance(v, Number) else v

    if o.size:
        expr = f"scale={o.size}"
    else:
        if o.percentage:
            f = format_number(o.percentage / 200)
            expr = f"scale=ceil(iw*{f})*2:ceil(ih*{f})*2"
        elif o.width is not None and o.height is not None:
            expr = f"scale={even(o.width)}:{even(o.height)}"
        elif o.width is not None:
            expr = f"scale={even(o.width)}:-2"
        else:
            expr = f"scale=-2:{even(o.height)}"

        if o.force_aspect_ratio and o.force_aspect_ratio != "disable":
            expr += f":force_original_aspect_ratio={o.force_aspect_ratio}:force_divisible_by=2"

    if o.flags:
        expr += f":flags={o.flags}"
    return None, expr


def blur(radius: float) -> FilterPair:
    return None, f"gblur=sigma={format_number(radius)}"


def flip(axis: str) -> FilterPair:
    return None, {"horizontal": "hflip", "vertical": "vflip"}.get(axis, "hflip,vflip")


def rotate(o: opts.RotateOptions) -> FilterPair:
    angle = o.expression or f"{format_number(o.degrees)}*PI/180"
    ow = f"rotw({angle})" if o.output_width is None else _v(o.output_width)
    oh = f"roth({angle})" if o.output_height is None else _v(o.output_height)
    return None, (
        f"format=yuva420p,rotate='{angle}':c='{o.empty_area_color}':ow='{ow}':oh='{oh}'"
    )


def alpha(value: float) -> FilterPair:
    return None, f"format=rgba,colorchannelmixer=aa={format_number(value)}"


def pad(o: opts.PadOptions) -> FilterPair:
    x = "(ow-iw)/2" if o.x is None else _v(o.x)
    y = "(oh-ih)/2" if o.y is None else _v(o.y)
    return None, f"pad={_v(o.width)}:{_v(o.height)}:{x}:{y}:{o.color}"


def negate(alpha: bool = False) -> FilterPair:
    return None, "negate=negate_alpha=1" if alpha else "negate"


def grayscale() -> FilterPair:
    return None, "format=gray"


def brightness(o: opts.BrightnessOptions) -> FilterPair:
    return None, _join("eq", [f"{k}={_quoted(v)}" for k, v in o.given().items()])


def hue(o: opts.HueOptions) -> FilterPair:
    # h: degrees, H: radians
    params = [f"H='{o.expression}'" if o.expression else f"h={format_number(o.degrees)}"]
    if o.saturation is not None:
        params.append(f"s={_quoted(o.saturation)}")
    if o.brightness is not None:
        params.append(f"b={_quoted(o.brightness)}")
    return None, _join("hue", params)


_balance_keys = {
    "red_shadows": "rs",
    "green_shadows": "gs",
    "blue_shadows": "bs",
    "red_midtones": "rm",
    "green_midtones": "gm",
    "blue_midtones": "bm",
    "red_highlights": "rh",
    "green_highlights": "gh",
    "blue_highlights": "bh",
    "preserve_lightness": "pl",
}


def color_balance(o: opts.ColorBalanceOptions) -> FilterPair:
    return None, _join(
        "colorbalance", [f"{_balance_keys[k]}={_v(v)}" for k, v in o.given().items()]
    )


# key: {input}_in_{output} -> {output}{input}
_mixer_keys = {
    f"{src}_in_{dst}": f"{dst[0]}{src[0]}"
    for src in ("red", "green", "blue", "alpha")
    for dst in ("red", "green", "blue", "alpha")
}
_mixer_keys.update(preserve_color_mode="pc", preserve_color_amount="pa")


def color_mixer(o: opts.ColorMixerOptions) -> FilterPair:
    return None, _join(
        "colorchannelmixer", [f"{_mixer_keys[k]}={_v(v)}" for k, v in o.given().items()]
    )


_lut_presets = {
    "golden hour": "lutrgb=r=1.2*val:g=1.1*val:b=0.8*val",
    "purple noir": "lutrgb=r=0.8*val:g=0.7*val:b=1.2*val",
    "grayscale": "lutyuv=y=val:u=128:v=128",
    "moonlight": "lutrgb=r='clipval*0.85':g='clipval*0.95':b='min(maxval,clipval*1.1)'",
    "teal & orange": "lutrgb=r='min(maxval,clipval*1.08)':g='clipval*0.97':b='clipval*0.9'",
    "vibrant": "lutrgb=r=1.2*val:g=1.2*val:b=1.2*val",
    "desaturated": "lutrgb=r=0.8*val:g=0.8*val:b=0.8*val",
    "negative": "lutrgb=r=negval:g=negval:b=negval",
    "matrix code green": "lutrgb=r=val*0.5:g=val*1.5:b=val*0.5",
    "cyberpunk": "lutrgb=r=val*0.7:g=val*0.3:b=val*1.4",
    "sepia": "lutrgb=r=val*1.2:g=val*1.1:b=val*0.9",
    "vintage film": "curves=preset=vintage",
}


def color_preset(preset: str) -> FilterPair:
    return None, _lut_presets[preset]


def color_multiplier(o: opts.ColorMultiplierOptions) -> FilterPair:
    params = [
        f"{k[0]}={_v(v)}*val" if isinstance(v, Number) else f"{k[0]}='({v})*val'"
        for k, v in o.given().items()
    ]
    expr = _join("lutrgb", params)
    return None, f"format=rgba,{expr}" if o.alpha is not None else expr


def remove_color(o: opts.RemoveColorOptions) -> FilterPair:
    params = [f"{k[0]}=0" for k in ("red", "green", "blue") if getattr(o, k)]
    return None, _join("lutrgb", params)


_deshake_keys = {
    "x": "x",
    "y": "y",
    "width": "w",
    "height": "h",
    "motion_range_x": "rx",
    "motion_range_y": "ry",
    "edge": "edge",
    "blocksize": "blocksize",
    "contrast": "contrast",
}


def deshake(o: opts.DeshakeOptions) -> FilterPair:
    return None, _join(
        "deshake", [f"{_deshake_keys[k]}={_v(v)}" for k, v in o.given().items()]
    )


def draw_text(o: opts.DrawTextOptions) -> FilterPair:
    params = [f"text={escape_filter_value(o.text)}"]
    if o.font_file is not None:
        params.append(f"fontfile='{o.font_file}'")
    if o.font_size is not None:
        params.append(f"fontsize={o.font_size}")
    if o.font_color is not None:
        params.append(f"fontcolor={_color(o.font_color)}")
    if o.x is not None:
        params.append(f"x={_quoted(o.x)}")
    if o.y is not None:
        params.append(f"y={_quoted(o.y)}")
    if o.border_width is not None:
        params.append(f"borderw={_v(o.border_width)}")
    if o.border_color is not None:
        params.append(f"bordercolor={_color(o.border_color)}")
    if o.shadow_x is not None:
        params.append(f"shadowx={o.shadow_x}")
    if o.shadow_y is not None:
        params.append(f"shadowy={o.shadow_y}")
    if o.shadow_color is not None:
        params.append(f"shadowcolor={_color(o.shadow_color)}")
    if o.box is not None:
        params.append(f"box={_v(o.box)}")
    if o.box_color is not None:
        params.append(f"boxcolor={_color(o.box_color)}")
    if o.box_border_width:
        params.append(f"boxborderw={'|'.join(_v(w) for w in o.box_border_width)}")
    if o.text_align is not None:
        params.append(f"textalign={o.text_align}")
    if o.line_spacing is not None:
        params.append(f"linespacing={_v(o.line_spacing)}")
    if o.enable is not None:
        params.append(f"enable={_quoted(o.enable)}")
    return None, _join("drawtext", params)


def draw_box(o: opts.DrawBoxOptions) -> FilterPair:
    box = [
        f"{k}={_quoted(v)}"
        for k, v in (("x", o.x), ("y", o.y), ("w", o.width), ("h", o.height), ("enable", o.enable))
        if v is not None
    ]
    filters = []
    if o.fill_color is not None:
        filters.append(_join("drawbox", [*box, "t=fill", f"color={o.fill_color}"]))
    if o.border_color is not None or o.thickness is not None:
        border = [*box, f"color={o.border_color or 'gray@1'}"]
        if o.thickness is not None:
            border.append(f"t={_v(o.thickness)}")
        filters.append(_join("drawbox", border))
    return None, ",".join(filters)


def overlay(o: opts.OverlayOptions) -> FilterPair:
    params = [f"x={_v(o.x)}", f"y={_v(o.y)}"]
    if o.enable is not None:
        params.append(f"enable={_quoted(o.enable)}")
    return None, _join("overlay", params)
