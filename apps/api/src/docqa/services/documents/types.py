from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentPair:
    source_text: str
    target_text: str
    source_ref: str
    target_ref: str

    @classmethod
    def empty(cls) -> DocumentPair:
        return cls(source_text="", target_text="", source_ref="", target_ref="")

    @property
    def is_ready(self) -> bool:
        return bool(self.source_text) and bool(self.target_text)
