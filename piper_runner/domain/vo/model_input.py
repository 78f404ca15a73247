from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

# Positional contract of a Piper voice: ids, id count, [speed, pitch, glottal].
REQUIRED_INPUT_COUNT = 3


@dataclass(frozen=True)
class ModelInputSlot:
    name: str
    shape: tuple[int | str | None, ...] = ()
    element_type: str = ""

    def describe(self) -> str:
        dims = ", ".join("?" if d is None else str(d) for d in self.shape)
        return f"name={self.name}, shape=({dims}), type={self.element_type}"


@dataclass(frozen=True)
class ModelInputSpec:
    slots: tuple[ModelInputSlot, ...] = ()

    @staticmethod
    def of(slots: Sequence[ModelInputSlot]) -> "ModelInputSpec":
        return ModelInputSpec(slots=tuple(slots))

    @staticmethod
    def from_names(*names: str) -> "ModelInputSpec":
        return ModelInputSpec(slots=tuple(ModelInputSlot(name=n) for n in names))

    def __iter__(self) -> Iterator[ModelInputSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(slot.name for slot in self.slots)

    @property
    def is_complete(self) -> bool:
        return len(self.slots) >= REQUIRED_INPUT_COUNT
