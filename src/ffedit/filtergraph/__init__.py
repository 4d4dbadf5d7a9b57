from __future__ import annotations

"""ffedit.filtergraph module - incremental filtergraph construction

    An editor never writes a filtergraph string directly. Filters are queued
    per stream in a :py:class:`Subgraph` and folded into :py:class:`Fragment`
    objects, each a single filterchain connecting labeled pads:

    ========================  ====================================================
    Pad                       Rendering
    ========================  ====================================================
    :py:class:`InputPad`      ``[{owner}:{a|v}]`` raw stream of a registered input
    :py:class:`PadTag`        ``[{owner}_{counter}:{a|v}]`` output of a fragment
    ========================  ====================================================

    Owner ids are replaced by the FFmpeg input indices only when the command
    is composed (see :py:func:`ffedit.configure.resolve_inputs`).

"""

from .tags import PadTag, InputPad, TagAllocator
from .Fragment import Fragment, Pad, split_chain
from .Subgraph import Subgraph

__all__ = ["PadTag", "InputPad", "TagAllocator", "Fragment", "Pad", "Subgraph", "compose", "split_chain"]


def compose(fragments, indices=None) -> str:
    """join fragments into a filtergraph expression

    :param fragments: sequence of :py:class:`Fragment`
    :param indices: owner to input index map, defaults to None (unresolved)
    :return: FFmpeg filtergraph expression
    """
    return ";".join(f.compose(indices) for f in fragments)
