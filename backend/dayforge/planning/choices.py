"""Tri-state label overrides: an explicit label, let the engine decide, or skip."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

AUTO_SENTINEL = "auto"
SKIP_SENTINEL = "skip"


@dataclass(frozen=True)
class LabelChoice:
    mode: Literal["explicit", "auto", "skip"]
    value: Optional[str] = None

    @classmethod
    def auto(cls) -> "LabelChoice":
        return cls("auto")

    @classmethod
    def skip(cls) -> "LabelChoice":
        return cls("skip")

    @classmethod
    def explicit(cls, value: str) -> "LabelChoice":
        if not value or not value.strip():
            raise ValueError("explicit label must be non-empty")
        return cls("explicit", value.strip())

    @classmethod
    def parse(cls, raw: Optional[str], *, allow_skip: bool = False) -> "LabelChoice":
        """Read a request field: empty or "auto" is auto; "skip" only where allowed."""
        text = (raw or "").strip()
        if not text or text.lower() == AUTO_SENTINEL:
            return cls.auto()
        if allow_skip and text.lower() == SKIP_SENTINEL:
            return cls.skip()
        return cls.explicit(text)

    @property
    def is_explicit(self) -> bool:
        return self.mode == "explicit"

    @property
    def is_skip(self) -> bool:
        return self.mode == "skip"

    def echo(self) -> str:
        """Response form: the explicit label, "auto" or "Skip"."""
        if self.mode == "explicit":
            return self.value or ""
        if self.mode == "skip":
            return "Skip"
        return AUTO_SENTINEL
