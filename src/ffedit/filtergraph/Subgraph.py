from __future__ import annotations

import logging

logger = logging.getLogger("ffedit")

from .._typing import Channel
from .tags import TagAllocator, PadTag
from .Fragment import Fragment, Pad

__all__ = ["Subgraph"]


class Subgraph:
    """Per-stream filter accumulator of an editor

    Filters are first collected in the audio and video buffers. ``materialize()``
    folds each non-empty buffer into a single :py:class:`Fragment` fed by the
    current output pad of its channel (or by the raw input stream of the owner
    before any fragment exists) and advances the pointer to the new output pad.

    :param owner: owner id of the primary input, used for raw-input pads and
                  for all allocated tags
    :param allocator: pad tag allocator, defaults to a new one
    """

    def __init__(self, owner: str, allocator: TagAllocator | None = None):
        self.owner = owner
        self.allocator = allocator or TagAllocator()
        self.fragments: list[Fragment] = []
        self.buffers: dict[Channel, list[str]] = {"a": [], "v": []}
        self.current: dict[Channel, PadTag | None] = {"a": None, "v": None}

    def __repr__(self):
        type_ = type(self)
        return f"""<{type_.__module__}.{type_.__qualname__} object at {hex(id(self))}>
    Owner: {self.owner}
    Fragments: {len(self.fragments)}
    Pending audio filters: {len(self.buffers['a'])}
    Pending video filters: {len(self.buffers['v'])}
"""

    def append(self, channel: Channel, expr: str | None):
        """queue a filter expression on a channel, empty expression is ignored"""
        if expr:
            self.buffers[channel].append(expr)

    def append_audio(self, expr: str | None):
        self.append("a", expr)

    def append_video(self, expr: str | None):
        self.append("v", expr)

    def head(self, channel: Channel) -> Pad:
        """current output pad of the channel or the raw input stream pad"""
        return self.current[channel] or self.allocator.input_pad(self.owner, channel)

    def has_output(self, channel: Channel) -> bool:
        """True if a fragment has produced an output pad on the channel"""
        return self.current[channel] is not None

    def _push(self, channel: Channel, inputs: list[Pad], expr: str) -> PadTag:
        tag = self.allocator.next_tag(self.owner, channel)
        fragment = Fragment(tuple(inputs), expr, tag)
        self.fragments.append(fragment)
        self.current[channel] = tag
        logger.debug("filtergraph fragment: %s", fragment)
        return tag

    def materialize(self) -> tuple[list[Fragment], PadTag | None, PadTag | None]:
        """fold the pending filters into fragments

        Calling it with empty buffers does not alter the graph.

        :return: all fragments in the order of creation, the final audio
                 output pad, and the final video output pad (None if the
                 channel was never filtered)
        """

        for channel in ("a", "v"):
            buffer = self.buffers[channel]
            if buffer:
                self._push(channel, [self.head(channel)], ",".join(buffer))
                self.buffers[channel] = []

        return list(self.fragments), self.current["a"], self.current["v"]

    def append_fragment(
        self, channel: Channel, expr: str, inputs: list[Pad] | None = None
    ) -> PadTag:
        """add a multi-input step directly to the graph

        The pending filters are materialized first so the step follows them.

        :param channel: output channel of the step
        :param expr: filterchain expression
        :param inputs: extra input pads, connected after the channel's current pad
        :return: the output pad of the new step
        """

        self.materialize()
        return self._push(channel, [self.head(channel), *(inputs or ())], expr)
