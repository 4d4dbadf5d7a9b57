from __future__ import annotations

from ._typing import Any, FFmpegArgs, FFmpegInputOptionTuple, FFmpegOptionDict, Iterable
from collections.abc import Mapping, Sequence

import logging

logger = logging.getLogger("ffedit")

from . import mime as _mime, policy
from .filtergraph import Fragment, PadTag, compose as compose_graph
from .options import OutputOptions, validate
from .registry import MediaInput
from .utils import format_number
from .utils.parser import FLAG

__all__ = ["empty", "resolve_inputs", "resolve_outputs", "build"]


def empty(global_options: dict = None) -> FFmpegArgs:
    """create empty ffmpeg arg dict

    :param global_options: global options, defaults to None
    :return: ffmpeg arg dict with empty 'inputs','outputs',and 'global_options' entries.
    """
    return {"inputs": [], "outputs": [], "global_options": global_options or {}}


def _first_with(inputs: Sequence[MediaInput], stream: str) -> int | None:
    return next((i for i, src in enumerate(inputs) if src.has_stream(stream)), None)


def resolve_inputs(
    fragments: Sequence[Fragment],
    audio_out: PadTag | None,
    video_out: PadTag | None,
    inputs: Iterable[MediaInput],
    mime: str,
) -> tuple[list[FFmpegInputOptionTuple], str | None, str | None, str | None]:
    """assign input indices and render the filtergraph

    :param fragments: materialized filtergraph fragments
    :param audio_out: final audio output pad, None if audio is not filtered
    :param video_out: final video output pad, None if video is not filtered
    :param inputs: registered sources in registration order
    :param mime: MIME type of the output file
    :return: input list (url-options pairs), ``filter_complex`` expression (None
             if no fragment), and the resolved audio and video output pad labels
    :raises UnresolvedInputError: if a pad refers to an unregistered source

    Still-image sources get the ``loop 1`` input option unless the output is a
    still image itself. Sources never referenced by the filtergraph are still
    declared so they can be mapped.
    """

    inputs = list(inputs)
    indices = {src.owner: i for i, src in enumerate(inputs)}
    still_target = _mime.category(mime) == "image"

    input_list = [
        (src.path, {"loop": 1} if src.type == "image" and not still_target else {})
        for src in inputs
    ]

    filter_complex = compose_graph(fragments, indices) if fragments else None

    return (
        input_list,
        filter_complex,
        audio_out and audio_out.resolve(indices),
        video_out and video_out.resolve(indices),
    )


_TRIM_FILTERS = frozenset(("trim", "atrim"))


def _needs_default_duration(
    inputs: Sequence[MediaInput], fragments: Sequence[Fragment], category: str
) -> bool:
    return (
        len(inputs) > 0
        and all(src.type == "image" for src in inputs)
        and not any(_TRIM_FILTERS.intersection(f.filter_names()) for f in fragments)
        and category in ("video", "animated")
    )


def resolve_outputs(
    inputs: Iterable[MediaInput],
    audio_map: str | None,
    video_map: str | None,
    mime: str,
    options: OutputOptions | Mapping[str, Any] | None = None,
    fragments: Sequence[Fragment] = (),
) -> tuple[FFmpegOptionDict, str | None, str | None]:
    """decide the output options and stream mapping

    :param inputs: registered sources in registration order
    :param audio_map: resolved audio output pad of the filtergraph or None
    :param video_map: resolved video output pad of the filtergraph or None
    :param mime: MIME type of the output file
    :param options: user output options, defaults to None
    :param fragments: materialized filtergraph fragments, defaults to ()
    :return: output option dict, audio map, and video map (None to not map)

    The audio (video) stream is carried if some source has one and the output
    container takes it, unless ``audio_none`` (``video_none``) is set. With no
    filtergraph pad for it, the first source carrying the stream is mapped
    directly with an optional stream specifier (``N:a?``). It is stream-copied
    if no codec is given (video only if the source and the output both move).

    ``options`` is never modified.
    """

    inputs = list(inputs)
    options = validate(OutputOptions, options, "output")
    category = _mime.category(mime)
    outopts = {}

    # audio
    map_audio = None
    first_audio = _first_with(inputs, "audio")
    if not options.audio_none and category in ("audio", "video") and first_audio is not None:
        if options.audio_codec:
            outopts["c:a"] = options.audio_codec
        if options.audio_bitrate:
            outopts["b:a"] = options.audio_bitrate
        if options.channels:
            outopts["ac"] = options.channels
        if audio_map:
            map_audio = audio_map
        else:
            map_audio = f"{first_audio}:a?"
            if not options.audio_codec:
                outopts["c:a"] = "copy"
    elif options.audio_none:
        outopts["an"] = FLAG

    # video
    map_video = None
    first_video = _first_with(inputs, "video")
    if not options.video_none and category != "audio" and first_video is not None:
        codec = options.video_codec
        # still images are re-encoded even when mapped directly
        copy = (
            not (codec or video_map)
            and category == "video"
            and inputs[first_video].type != "image"
        )
        pix_fmt = options.pixel_format
        if (
            pix_fmt is None
            and category == "video"
            and not copy
            and codec in (None, policy.DEFAULT_VIDEO_CODEC)
        ):
            pix_fmt = policy.DEFAULT_PIXEL_FORMAT

        if codec:
            outopts["c:v"] = codec
        if options.video_bitrate:
            outopts["b:v"] = options.video_bitrate
        if options.fps:
            outopts["r"] = options.fps if isinstance(options.fps, str) else format_number(options.fps)
        if options.crf is not None:
            outopts["crf"] = format_number(options.crf)
        if options.preset:
            outopts["preset"] = options.preset
        if pix_fmt:
            outopts["pix_fmt"] = pix_fmt
        if category == "image":
            outopts["frames:v"] = 1

        map_video = video_map or f"{first_video}:v?"
        if copy:
            outopts["c:v"] = "copy"
    elif options.video_none:
        outopts["vn"] = FLAG

    if mime in policy.LOOPED_IMAGE_TYPES:
        outopts["loop"] = 0

    duration = options.duration
    if duration is None and _needs_default_duration(inputs, fragments, category):
        duration = policy.DEFAULT_IMAGE_DURATION
        logger.info("still-image inputs only: output duration set to %s s", duration)
    if duration:
        outopts["t"] = format_number(duration)

    if options.shortest:
        outopts["shortest"] = FLAG

    return outopts, map_audio, map_video


def build(
    inputs: Iterable[MediaInput],
    fragments: Sequence[Fragment],
    audio_out: PadTag | None,
    video_out: PadTag | None,
    output: str,
    mime: str,
    options: OutputOptions | Mapping[str, Any] | None = None,
) -> FFmpegArgs:
    """compose the FFmpeg argument dict of an edit

    :param inputs: registered sources in registration order
    :param fragments: materialized filtergraph fragments
    :param audio_out: final audio output pad or None
    :param video_out: final video output pad or None
    :param output: output file path
    :param mime: MIME type of the output file
    :param options: user output options, defaults to None
    :return: FFmpeg argument dict

    A filtered stream that is not mapped (excluded with ``audio_none`` or
    ``video_none``, or not taken by the output container) is terminated with
    ``anullsink`` (``nullsink``) so the filtergraph has no unconnected output.
    """

    inputs = list(inputs)
    options = validate(OutputOptions, options, "output")

    input_list, filter_complex, audio_map, video_map = resolve_inputs(
        fragments, audio_out, video_out, inputs, mime
    )
    outopts, map_audio, map_video = resolve_outputs(
        inputs, audio_map, video_map, mime, options, fragments
    )

    # a filtered stream left out of the output still needs its pad consumed
    sinks = [
        f"{pad}{sink}"
        for pad, mapped, sink in (
            (audio_map, map_audio, "anullsink"),
            (video_map, map_video, "nullsink"),
        )
        if pad and pad != mapped
    ]
    if sinks:
        logger.debug("discarding unmapped filtergraph outputs: %s", sinks)
        filter_complex = ";".join((filter_complex, *sinks))

    args = empty({"y": FLAG} if options.overwrite else None)
    args["inputs"].extend(input_list)

    opts = {}
    if filter_complex:
        opts["filter_complex"] = filter_complex
    maps = [m for m in (map_audio, map_video) if m]
    if maps:
        opts["map"] = maps
    opts.update(outopts)
    args["outputs"].append((output, opts))

    return args
