"""Fluent media editors

An editor wraps one primary media file. Each filter method validates its
options, checks that the stream it works on exists, queues the filter and
returns the editor itself so calls can be chained::

    ffedit.VideoEditor("in.mp4").volume(0.5).crop(width=640, height=360).run("out.mp4")

Nothing is executed until :py:meth:`MediaEditor.run` is called.
"""

from __future__ import annotations

from os import makedirs, path as _path
import logging

logger = logging.getLogger("ffedit")

from ._typing import (
    Any,
    Channel,
    FFmpegArgs,
    Literal,
    MediaType,
    NamedTuple,
    PathType,
    StreamSelector,
    StreamSummary,
)
from . import configure, ffmpegprocess, filters, mime, policy, probe
from . import options as opts
from .errors import InvalidOutputPathError, MetadataError, MissingStreamError, FilterOptionError
from .filtergraph import Fragment, PadTag, Subgraph, TagAllocator
from .registry import InputRegistry, MediaInput
from .utils import normalize_path
from .utils.parser import compose

__all__ = ["MediaEditor", "AudioEditor", "VideoEditor", "ImageEditor", "EditorState", "detect_type"]

_CHANNELS: dict[str, Channel] = {"audio": "a", "video": "v"}


class EditorState(NamedTuple):
    """Materialized filtergraph of an editor"""

    fragments: list[Fragment]
    audio_output: PadTag | None
    video_output: PadTag | None


def detect_type(metadata: StreamSummary) -> MediaType:
    """classify a media file from its stream summary

    :param metadata: probed stream summary
    :return: ``"audio"`` if it only carries audio, ``"image"`` if its video
             stream is a single picture, else ``"video"``
    :raises MetadataError: if the file has neither audio nor video
    """

    has_audio = metadata.get("has_audio", False)
    has_video = metadata.get("has_video", False)
    if has_audio and not has_video:
        return "audio"
    if not has_video:
        raise MetadataError("no video or audio stream found")

    format_name = metadata.get("format_name", None) or ""
    frame_count = metadata.get("frame_count", None)
    if (
        format_name.startswith("image2")
        or format_name.endswith("_pipe")
        or (frame_count is None and not metadata.get("duration", None))
        or (frame_count is not None and frame_count <= 1)
    ):
        return "image"
    return "video"


def _probe_source(path: PathType, type: MediaType | None = None) -> tuple[str, MediaType, StreamSummary]:
    path = normalize_path(path)
    if not path:
        raise ValueError("media file path is required")
    metadata = probe.summary(path)
    return path, type or detect_type(metadata), metadata


class MediaEditor:
    """Editor of a media file

    :param path: media file path or a sequence of its path components
    :param type: force the media type, defaults to None (detected from the
                 probed streams)
    :raises MetadataError: if the file cannot be probed or carries no stream
    """

    media_type: MediaType | None = None

    def __init__(self, path: PathType, type: MediaType | None = None):
        path, type, metadata = _probe_source(path, type or self.media_type)

        self.inputs = InputRegistry()
        self.owner = self.inputs.register(path, type, metadata)
        self.subgraph = Subgraph(self.owner, TagAllocator())
        self._output_defaults: dict[str, Any] = {}

    def __repr__(self):
        type_ = type(self)
        return f"""<{type_.__module__}.{type_.__qualname__} object at {hex(id(self))}>
    Source: {self.path} ({self.type})
    Inputs: {len(self.inputs)}
    Fragments: {len(self.subgraph.fragments)}
"""

    @property
    def source(self) -> MediaInput:
        """primary input"""
        return self.inputs[self.owner]

    @property
    def path(self) -> str:
        return self.source.path

    @property
    def type(self) -> MediaType:
        return self.source.type

    @property
    def metadata(self) -> StreamSummary:
        """stream summary of the primary input"""
        return self.source.metadata

    def full_metadata(self) -> dict:
        """complete ffprobe output of the primary input"""
        return probe.full_details(self.path, cache_output=True)

    @property
    def state(self) -> EditorState:
        """filtergraph after folding all the queued filters"""
        return EditorState(*self.subgraph.materialize())

    #### stream bookkeeping ####

    def has_stream(self, stream: Literal["audio", "video"]) -> bool:
        """True if the stream exists in the source or has been produced by a filter"""
        return self.source.has_stream(stream) or self.subgraph.has_output(_CHANNELS[stream])

    def _require(self, stream: Literal["audio", "video"], name: str):
        if not self.has_stream(stream):
            raise MissingStreamError(stream, name)

    def _add(self, pair: filters.FilterPair):
        audio, video = pair
        self.subgraph.append_audio(audio)
        self.subgraph.append_video(video)
        return self

    def _add_audio(self, name: str, pair: filters.FilterPair):
        self._require("audio", name)
        return self._add((pair[0], None))

    def _add_video(self, name: str, pair: filters.FilterPair):
        self._require("video", name)
        return self._add((None, pair[1]))

    def _add_selected(self, name: str, pair: filters.FilterPair, stream: StreamSelector | None):
        # two-stream filter, applied to the selected streams that exist
        has_audio = self.has_stream("audio")
        has_video = self.has_stream("video")
        if not (has_audio or has_video):
            raise MissingStreamError("audio/video", name)
        if stream == "audio" and not has_audio:
            raise MissingStreamError("audio", name)
        if stream == "video" and not has_video:
            raise MissingStreamError("video", name)

        audio, video = pair
        return self._add(
            (
                audio if has_audio and stream != "video" else None,
                video if has_video and stream != "audio" else None,
            )
        )

    #### audio filters ####

    def volume(self, volume: float | str, **options) -> MediaEditor:
        """change the audio volume

        :param volume: gain factor (e.g., 0.5), in dB (e.g., ``"-6dB"``), or an expression
        :param precision: ``"fixed"``, ``"float"``, or ``"double"``, optional
        :param eval_mode: ``"once"`` or ``"frame"``, optional
        """
        o = opts.validate(opts.VolumeOptions, options, "volume", volume=volume)
        return self._add_audio("volume", filters.volume(o))

    def loudnorm(self, **options) -> MediaEditor:
        """EBU R128 loudness normalization

        :param average: integrated loudness target in LUFS, defaults to -23
        :param range: loudness range target in LU, defaults to 9
        :param peak: maximum true peak in dBTP, defaults to -1
        :param linear: True to normalize linearly, optional
        """
        o = opts.validate(opts.LoudnormOptions, options, "loudnorm")
        return self._add_audio("loudnorm", filters.loudnorm(o))

    def dynaudnorm(self, **options) -> MediaEditor:
        """dynamic audio normalization"""
        o = opts.validate(opts.DynaudnormOptions, options, "dynaudnorm")
        return self._add_audio("dynaudnorm", filters.dynaudnorm(o))

    def pitch(self, factor: float) -> MediaEditor:
        """shift the pitch without changing the tempo

        :param factor: pitch ratio between 0.125 and 8, e.g., 2 for an octave up
        """
        factor = opts.validate(opts.PITCH_FACTOR, factor, "pitch")
        sample_rate = self.metadata.get("audio_sample_rate", None) or policy.DEFAULT_SAMPLE_RATE
        return self._add_audio("pitch", filters.pitch(factor, sample_rate))

    def pan(self, layout: str, channels: list) -> MediaEditor:
        """remix the audio channels

        :param layout: output layout: ``"mono"``, ``"stereo"``, ``"5.1"``, or ``"7.1"``
        :param channels: per output channel, a gain of the same input channel or
                         a pan expression (e.g., ``"0.5*c0+0.5*c1"``)
        """
        o = opts.validate(opts.PanOptions, None, "pan", layout=layout, channels=channels)
        return self._add_audio("pan", filters.pan(o))

    #### audio & video filters ####

    def trim(self, **options) -> MediaEditor:
        """keep a time section

        :param start: start time, optional
        :param end: end time, exclusive with ``duration``, optional
        :param duration: section duration, optional
        :param stream: ``"audio"``, ``"video"``, or ``"all"`` (default)
        """
        o = opts.validate(opts.TrimOptions, options, "trim")
        return self._add_selected("trim", filters.trim(o), o.stream)

    def fade(self, duration: float, **options) -> MediaEditor:
        """fade in or out

        :param duration: fade duration in seconds
        :param type: ``"in"`` (default) or ``"out"``
        :param start: start time in seconds, defaults to 0
        :param curve: audio fade curve, optional
        :param color: video fade color, defaults to transparent
        :param stream: ``"audio"``, ``"video"``, or ``"all"`` (default)
        """
        o = opts.validate(opts.FadeOptions, options, "fade", duration=duration)
        return self._add_selected("fade", filters.fade(o), o.stream)

    def reverse(self, stream: StreamSelector | None = None) -> MediaEditor:
        """play backwards (the whole stream is buffered by FFmpeg)"""
        stream = opts.validate(opts.STREAM, stream, "reverse")
        return self._add_selected("reverse", filters.reverse(), stream)

    def delay(self, seconds: float) -> MediaEditor:
        """delay the start, video is padded with transparent frames"""
        seconds = opts.validate(opts.DELAY_SECONDS, seconds, "delay")
        return self._add_selected("delay", filters.delay(seconds), None)

    def speed(self, factor: float) -> MediaEditor:
        """change the playback speed

        :param factor: speed ratio between -100 and 100, a negative factor also
                       reverses the playback. 1 and -1 leave the speed unchanged.
        """

        factor = opts.validate(opts.SPEED_FACTOR, factor, "speed")
        if factor == 0:
            raise FilterOptionError("speed", [{"loc": ("factor",), "msg": "cannot be 0"}])
        if factor < 0:
            self.reverse()
        if abs(factor) == 1:
            return self
        return self._add_selected("speed", filters.speed(abs(factor)), None)

    def denoise(self, method: str = "hqdn3d") -> MediaEditor:
        """reduce noise

        :param method: ``"hqdn3d"``, ``"nlmeans"``, ``"atadenoise"`` (video), or
                       ``"afftdn"`` (audio)
        """
        method = opts.validate(opts.DENOISE_METHOD, method, "denoise")
        if method == "afftdn":
            return self._add_audio(f"denoise[{method}]", filters.denoise(method))
        return self._add_video(f"denoise[{method}]", filters.denoise(method))

    #### video filters ####

    def crop(self, **options) -> MediaEditor:
        """crop the frame to a size or to an aspect ratio

        :param width: output width in pixels or expression, optional
        :param height: output height in pixels or expression, optional
        :param x: horizontal position of the crop area, optional (centered)
        :param y: vertical position of the crop area, optional (centered)
        :param aspect_ratio: ``"W:H"`` to crop to the largest centered area of
                             this ratio, exclusive with ``width``/``height``
        """
        o = opts.validate(opts.CropOptions, options, "crop")
        pair = filters.crop(o, self.metadata.get("width", None), self.metadata.get("height", None))
        return self._add_video("crop", pair)

    def scale(self, **options) -> MediaEditor:
        """resize the frame

        :param width: output width, optional (-1 or omitted keeps the aspect ratio)
        :param height: output height, optional
        :param percentage: output size in percent of the input, optional
        :param size: FFmpeg video size, e.g., ``"hd720"``, optional
        :param force_aspect_ratio: ``"increase"``, ``"decrease"``, or ``"disable"``
        :param flags: scaling algorithm, optional
        """
        o = opts.validate(opts.ScaleOptions, options, "scale")
        return self._add_video("scale", filters.scale(o))

    def blur(self, radius: float = 3) -> MediaEditor:
        radius = opts.validate(opts.BLUR_RADIUS, radius, "blur")
        return self._add_video("blur", filters.blur(radius))

    def flip(self, axis: Literal["horizontal", "vertical", "both"] = "horizontal") -> MediaEditor:
        axis = opts.validate(opts.FLIP_AXIS, axis, "flip")
        return self._add_video("flip", filters.flip(axis))

    def rotate(self, degrees: float | None = None, **options) -> MediaEditor:
        """rotate the frame

        :param degrees: clockwise rotation angle, exclusive with ``expression``
        :param expression: rotation angle expression in radians, optional
        :param output_width: output width, defaults to fit the rotated frame
        :param output_height: output height, defaults to fit the rotated frame
        :param empty_area_color: fill color, defaults to transparent black
        """
        if degrees is not None:
            options["degrees"] = degrees
        o = opts.validate(opts.RotateOptions, options, "rotate")
        return self._add_video("rotate", filters.rotate(o))

    def alpha(self, value: float) -> MediaEditor:
        """set the opacity of the frame, 0 (transparent) to 1 (opaque)"""
        value = opts.validate(opts.ALPHA_VALUE, value, "alpha")
        return self._add_video("alpha", filters.alpha(value))

    def pad(self, width: float | str, height: float | str, **options) -> MediaEditor:
        o = opts.validate(opts.PadOptions, options, "pad", width=width, height=height)
        return self._add_video("pad", filters.pad(o))

    def negate(self, alpha: bool = False) -> MediaEditor:
        return self._add_video("negate", filters.negate(bool(alpha)))

    def grayscale(self) -> MediaEditor:
        return self._add_video("grayscale", filters.grayscale())

    def brightness(self, **options) -> MediaEditor:
        """adjust brightness, contrast, saturation, and gamma"""
        o = opts.validate(opts.BrightnessOptions, options, "brightness")
        return self._add_video("brightness", filters.brightness(o))

    def hue(self, degrees: float | None = None, **options) -> MediaEditor:
        if degrees is not None:
            options["degrees"] = degrees
        o = opts.validate(opts.HueOptions, options, "hue")
        return self._add_video("hue", filters.hue(o))

    def color_balance(self, **options) -> MediaEditor:
        o = opts.validate(opts.ColorBalanceOptions, options, "color_balance")
        return self._add_video("color_balance", filters.color_balance(o))

    def color_mixer(self, **options) -> MediaEditor:
        o = opts.validate(opts.ColorMixerOptions, options, "color_mixer")
        return self._add_video("color_mixer", filters.color_mixer(o))

    def color_preset(self, preset: str) -> MediaEditor:
        """apply a color look, see :py:data:`ffedit.options.COLOR_PRESETS`"""
        preset = opts.validate(opts.COLOR_PRESET, preset, "color_preset")
        return self._add_video("color_preset", filters.color_preset(preset))

    def color_multiplier(self, **options) -> MediaEditor:
        o = opts.validate(opts.ColorMultiplierOptions, options, "color_multiplier")
        return self._add_video("color_multiplier", filters.color_multiplier(o))

    def remove_color(self, **options) -> MediaEditor:
        o = opts.validate(opts.RemoveColorOptions, options, "remove_color")
        return self._add_video("remove_color", filters.remove_color(o))

    def deshake(self, **options) -> MediaEditor:
        o = opts.validate(opts.DeshakeOptions, options, "deshake")
        return self._add_video("deshake", filters.deshake(o))

    def draw_text(self, text: str, **options) -> MediaEditor:
        """draw text on the frame

        :param text: text to draw, special characters are escaped
        :param \\**options: font, position, border, shadow, and box options, see
                           :py:class:`ffedit.options.DrawTextOptions`
        """
        o = opts.validate(opts.DrawTextOptions, options, "draw_text", text=text)
        return self._add_video("draw_text", filters.draw_text(o))

    def draw_box(self, x, y, width, height, **options) -> MediaEditor:
        o = opts.validate(
            opts.DrawBoxOptions, options, "draw_box", x=x, y=y, width=width, height=height
        )
        return self._add_video("draw_box", filters.draw_box(o))

    #### multi-input filters ####

    def _add_input(self, path: PathType, stream: Literal["audio", "video"], name: str) -> MediaInput:
        path, type, metadata = _probe_source(path)
        if not metadata.get(f"has_{stream}", False):
            raise MissingStreamError(stream, name)
        return self.inputs[self.inputs.register(path, type, metadata)]

    def overlay(self, path: PathType, x: float | str = 0, y: float | str = 0, enable=None) -> MediaEditor:
        """draw another image or video on top of the frame

        :param path: overlaid media file
        :param x: horizontal position of the overlay, defaults to 0
        :param y: vertical position of the overlay, defaults to 0
        :param enable: timeline expression enabling the overlay, optional
        """

        self._require("video", "overlay")
        o = opts.validate(opts.OverlayOptions, None, "overlay", x=x, y=y, enable=enable)
        src = self._add_input(path, "video", "overlay")
        pad = self.subgraph.allocator.input_pad(src.owner, "v")
        self.subgraph.append_fragment("v", filters.overlay(o)[1], [pad])
        return self

    def mix(self, path: PathType, **options) -> MediaEditor:
        """mix the audio of another file into the audio stream

        :param path: media file whose audio is mixed in
        :param duration: ``"longest"`` (default), ``"shortest"``, or ``"first"``
        :param dropout_transition: volume renormalization time in seconds, optional
        :param weights: input weights, optional
        :param normalize: False to keep the input levels, optional
        """

        self._require("audio", "mix")
        o = opts.validate(opts.MixOptions, options, "mix")
        src = self._add_input(path, "audio", "mix")
        pad = self.subgraph.allocator.input_pad(src.owner, "a")
        self.subgraph.append_fragment("a", filters.amix(2, o)[0], [pad])
        return self

    #### stream exclusion ####

    def mute(self) -> MediaEditor:
        """drop the audio from the output"""
        self._output_defaults["audio_none"] = True
        return self

    def blind(self) -> MediaEditor:
        """drop the video from the output"""
        self._output_defaults["video_none"] = True
        return self

    #### output ####

    def args(self, output: PathType, **options) -> FFmpegArgs:
        """FFmpeg arguments to write the edited media

        :param output: output file path, its extension selects the container
        :param \\**options: output options, see :py:class:`ffedit.options.OutputOptions`
        :return: FFmpeg argument dict
        :raises InvalidOutputPathError: if output is empty
        :raises InvalidFileExtensionError: if output has no extension
        :raises InvalidMimeTypeError: if the extension is unknown
        """

        output = normalize_path(output)
        if not output:
            raise InvalidOutputPathError()
        output_mime = mime.guess(output)
        o = opts.validate(opts.OutputOptions, {**self._output_defaults, **options}, "output")

        fragments, audio_out, video_out = self.subgraph.materialize()
        return configure.build(self.inputs, fragments, audio_out, video_out, output, output_mime, o)

    def command(self, output: PathType, **options) -> list[str]:
        """FFmpeg command line as a list of arguments"""
        return compose(self.args(output, **options), command="ffmpeg")

    def command_line(self, output: PathType, **options) -> str:
        """FFmpeg command line as a shell-ready string"""
        return compose(self.args(output, **options), command="ffmpeg", shell_command=True)

    def run(self, output: PathType, **options) -> str:
        """write the edited media

        The output directory is created if missing.

        :param output: output file path
        :param \\**options: output options, see :py:class:`ffedit.options.OutputOptions`
        :return: the executed command line
        :raises OutputExistsError: if output exists and ``overwrite=False``
        :raises FFmpegCommandError: if FFmpeg fails
        """

        args = self.args(output, **options)
        dst = args["outputs"][0][0]
        dirname = _path.dirname(dst)
        if dirname:
            makedirs(dirname, exist_ok=True)

        cmd = compose(args, command="ffmpeg", shell_command=True)
        logger.info(cmd)
        ffmpegprocess.run(args)
        return cmd


class AudioEditor(MediaEditor):
    """Editor of an audio file"""

    media_type = "audio"


class VideoEditor(MediaEditor):
    """Editor of a video file"""

    media_type = "video"


class ImageEditor(MediaEditor):
    """Editor of a still image"""

    media_type = "image"
