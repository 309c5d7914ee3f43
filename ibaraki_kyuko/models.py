from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

API_VERSION = "1.0.0"
UNKNOWN_DATE = "date unknown"
OTHER_KIND = "other"


class Marker(Enum):
    """Leading glyphs of record paragraphs and the category each one announces."""

    CANCELLED = ("◉", "休講")
    MAKEUP = ("◎", "補講")
    REMOTE = ("◇", "遠隔")
    CHANGED = ("☆", "変更")

    def __init__(self, symbol: str, kind: str) -> None:
        self.symbol = symbol
        self.kind = kind

    @classmethod
    def symbols(cls) -> str:
        return "".join(marker.symbol for marker in cls)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional[Marker]:
        for marker in cls:
            if marker.symbol == symbol:
                return marker
        return None

    @classmethod
    def kind_for(cls, symbol: str) -> str:
        marker = cls.from_symbol(symbol)
        if marker is None:
            return OTHER_KIND
        return marker.kind


@dataclass(frozen=True)
class Paragraph:
    text: str
    has_mark: bool = False


@dataclass(frozen=True)
class CancellationRecord:
    date: str
    kind: str
    symbol: str
    target_class: str
    period: str
    subject: str
    raw_text: str
    subject_from: Optional[str] = None
    subject_to: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.subject_from is None) != (self.subject_to is None):
            raise ValueError("subject_from and subject_to must be set together")

    @property
    def is_substitution(self) -> bool:
        return self.subject_from is not None

    def to_dict(self) -> dict:
        body = {
            "date": self.date,
            "kind": self.kind,
            "symbol": self.symbol,
            "target_class": self.target_class,
            "period": self.period,
            "subject": self.subject,
        }
        if self.is_substitution:
            body["subject_from"] = self.subject_from
            body["subject_to"] = self.subject_to
        body["raw_text"] = self.raw_text
        return body


@dataclass
class PostMeta:
    source_url: Optional[str]
    updated_at: Optional[str]
    title: Optional[str]
    api_version: str = field(default=API_VERSION)

    @classmethod
    def from_wp_post(cls, post: dict) -> PostMeta:
        title = post.get("title") or {}
        return cls(
            source_url=post.get("link"),
            updated_at=post.get("modified"),
            title=title.get("rendered") if isinstance(title, dict) else None,
        )

    def to_dict(self) -> dict:
        return {
            "source_url": self.source_url,
            "updated_at": self.updated_at,
            "title": self.title,
            "api_version": self.api_version,
        }


def build_envelope(meta: PostMeta, records: list[CancellationRecord]) -> dict:
    return {"meta": meta.to_dict(), "data": [record.to_dict() for record in records]}
