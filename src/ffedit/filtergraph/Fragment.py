from __future__ import annotations

from collections.abc import Mapping

from .._typing import NamedTuple, Sequence, Union
from .tags import PadTag, InputPad

__all__ = ["Fragment", "Pad", "split_chain"]

Pad = Union[PadTag, InputPad]


def split_chain(expression: str) -> list[str]:
    """split a filterchain at the commas that are neither quoted nor escaped"""

    filters = []
    start = 0
    quoted = escaped = False
    for i, c in enumerate(expression):
        if escaped:
            escaped = False
        elif quoted:
            quoted = c != "'"
        elif c == "\\":
            escaped = True
        elif c == "'":
            quoted = True
        elif c == ",":
            filters.append(expression[start:i])
            start = i + 1
    filters.append(expression[start:])
    return filters


class Fragment(NamedTuple):
    """One step of a filtergraph: labeled inputs, a filterchain, and its output label

    :param inputs: input pads, connected in order
    :param expression: filterchain expression (filters joined by ``,``)
    :param output: output pad of the last filter
    """

    inputs: Sequence[Pad]
    expression: str
    output: PadTag

    def __str__(self) -> str:
        return "".join(str(p) for p in self.inputs) + self.expression + str(self.output)

    def compose(self, indices: Mapping[str, int] | None = None) -> str:
        """compose the FFmpeg expression of the fragment

        :param indices: owner to input index map, defaults to None to leave
                        the owner ids in the pad labels
        :return: filterchain with its input and output labels
        """
        if indices is None:
            return str(self)
        return (
            "".join(p.resolve(indices) for p in self.inputs)
            + self.expression
            + self.output.resolve(indices)
        )

    def owners(self) -> set[str]:
        """owner ids referenced by the fragment"""
        return {p.owner for p in (*self.inputs, self.output)}

    def filter_names(self) -> list[str]:
        """names of the filters in the chain, in order"""
        return [f.split("=", 1)[0].strip() for f in split_chain(self.expression)]
