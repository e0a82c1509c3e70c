"""Generic mapping helper used to turn entities into DTOs."""

from __future__ import annotations

from typing import Callable, Generic, List, Optional, Sequence, TypeVar

SourceT = TypeVar("SourceT")
TargetT = TypeVar("TargetT")


class GenericConverter(Generic[SourceT, TargetT]):
    """Apply a conversion function to one item or to a list of items."""

    def convert_all(
        self, source: Optional[Sequence[SourceT]], converter: Optional[Callable[[SourceT], TargetT]]
    ) -> List[TargetT]:
        if source is None or converter is None:
            raise ValueError("Source list or converter function cannot be null")
        return [converter(item) for item in source]

    def convert_one(self, source: Optional[SourceT], converter: Optional[Callable[[SourceT], TargetT]]) -> TargetT:
        if source is None or converter is None:
            raise ValueError("Source or converter function cannot be null")
        return converter(source)
