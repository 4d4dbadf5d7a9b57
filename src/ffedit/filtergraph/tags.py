from __future__ import annotations

from collections.abc import Mapping

from .._typing import Channel, NamedTuple
from ..errors import UnresolvedInputError

__all__ = ["PadTag", "InputPad", "TagAllocator"]


def _lookup(indices: Mapping[str, int], owner: str) -> int:
    try:
        return indices[owner]
    except KeyError:
        raise UnresolvedInputError(owner) from None


class PadTag(NamedTuple):
    """Link label of a filter output pad

    Rendered ``[{owner}_{counter}:{channel}]`` until the owner is resolved to
    its input index, then ``[{index}_{counter}:{channel}]``.
    """

    owner: str
    counter: int
    channel: Channel

    def __str__(self) -> str:
        return f"[{self.owner}_{self.counter}:{self.channel}]"

    def resolve(self, indices: Mapping[str, int]) -> str:
        """render the label with the owner replaced by its input index

        :param indices: owner id to FFmpeg input index map
        :raises UnresolvedInputError: if owner is not in ``indices``
        """
        return f"[{_lookup(indices, self.owner)}_{self.counter}:{self.channel}]"


class InputPad(NamedTuple):
    """Raw stream of a registered input, ``[{owner}:{channel}]`` until resolved"""

    owner: str
    channel: Channel

    def __str__(self) -> str:
        return f"[{self.owner}:{self.channel}]"

    def resolve(self, indices: Mapping[str, int]) -> str:
        """render as an FFmpeg input stream specifier, e.g., ``[0:a]``"""
        return f"[{_lookup(indices, self.owner)}:{self.channel}]"


class TagAllocator:
    """Issues pad tags that are unique for the lifetime of the allocator

    Counters are kept per owner and only ever increase.
    """

    def __init__(self):
        self._counters: dict[str, int] = {}

    def next_tag(self, owner: str, channel: Channel) -> PadTag:
        counter = self._counters.get(owner, 0)
        self._counters[owner] = counter + 1
        return PadTag(owner, counter, channel)

    def input_pad(self, owner: str, channel: Channel) -> InputPad:
        return InputPad(owner, channel)
