from __future__ import annotations
from typing import Iterator, List, Sequence, Tuple

from case_retrieval.core.errors import PositionOutOfRange
from case_retrieval.models.passage import Passage


class CorpusRegistry:
    """
    Ordinal mapping from index position to source passage.
    Built once per rebuild, alongside the index it describes; never mutated.
    """

    def __init__(self, passages: Sequence[Passage]) -> None:
        for expected, p in enumerate(passages):
            if p.position != expected:
                raise ValueError(f"passage at slot {expected} has position {p.position}")
        self._passages: Tuple[Passage, ...] = tuple(passages)

    @classmethod
    def from_texts(cls, texts: Sequence[str]) -> "CorpusRegistry":
        return cls([Passage(position=i, text=t) for i, t in enumerate(texts)])

    def resolve(self, position: int) -> Passage:
        if not 0 <= position < len(self._passages):
            raise PositionOutOfRange(
                f"position {position} outside registry of size {len(self._passages)}"
            )
        return self._passages[position]

    def texts(self) -> List[str]:
        return [p.text for p in self._passages]

    def __len__(self) -> int:
        return len(self._passages)

    def __iter__(self) -> Iterator[Passage]:
        return iter(self._passages)
