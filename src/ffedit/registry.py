from __future__ import annotations

import hashlib
import logging

logger = logging.getLogger("ffedit")

from ._typing import MediaType, NamedTuple, StreamSummary, Literal, Iterator

__all__ = ["MediaInput", "InputRegistry"]


class MediaInput(NamedTuple):
    """A media source of an FFmpeg command"""

    owner: str  # owner id used in the pad labels
    path: str  # file path
    type: MediaType  # source kind
    metadata: StreamSummary  # probed summary

    def has_stream(self, stream: Literal["audio", "video"]) -> bool:
        return bool(self.metadata.get(f"has_{stream}", False))


class InputRegistry:
    """Ordered collection of the input sources of an editor

    The registration order is the FFmpeg input order. A source is registered
    once per (path, type) pair, registering it again returns its owner id.
    """

    def __init__(self):
        self._inputs: dict[str, MediaInput] = {}
        self._keys: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        return len(self._inputs)

    def __iter__(self) -> Iterator[MediaInput]:
        return iter(self._inputs.values())

    def __contains__(self, owner: str) -> bool:
        return owner in self._inputs

    def __getitem__(self, owner: str) -> MediaInput:
        return self._inputs[owner]

    def _new_owner(self, path: str, type: str) -> str:
        digest = hashlib.md5(f"{path}{type}".encode()).hexdigest()
        n = 6
        while digest[:n] in self._inputs:
            n += 1
        return digest[:n]

    def register(self, path: str, type: MediaType, metadata: StreamSummary) -> str:
        """add a source

        :param path: media file path
        :param type: source kind
        :param metadata: probed stream summary of the source
        :return: owner id of the source
        """

        key = (path, type)
        owner = self._keys.get(key, None)
        if owner is not None:
            return owner

        owner = self._new_owner(path, type)
        self._inputs[owner] = MediaInput(owner, path, type, metadata)
        self._keys[key] = owner
        logger.debug("registered %s input %s as %s", type, path, owner)
        return owner

    def all(self) -> list[MediaInput]:
        """all sources in registration order"""
        return list(self._inputs.values())

    def indices(self) -> dict[str, int]:
        """owner id to FFmpeg input index map"""
        return {owner: i for i, owner in enumerate(self._inputs)}

    def first_with(self, stream: Literal["audio", "video"]) -> tuple[int, MediaInput] | None:
        """first source carrying the stream

        :param stream: ``"audio"`` or ``"video"``
        :return: its input index and the source or None if no source has the stream
        """
        return next(
            ((i, src) for i, src in enumerate(self._inputs.values()) if src.has_stream(stream)),
            None,
        )
