from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    anchor: str

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "text": self.text, "anchor": self.anchor}


@dataclass(frozen=True, slots=True)
class Post:
    title: str
    date: int
    slug: str
    body: str
    draft: bool = False
    category: str = ""
    tags: Tuple[str, ...] = ()
    description: str = ""
    html: str = field(default="", compare=False)
    toc: Tuple[Heading, ...] = field(default=(), compare=False)

    def meta(self) -> Dict[str, Any]:
        """Front-matter fields, in the order they are written back to disk."""
        return {
            "title": self.title,
            "date": self.date,
            "draft": self.draft,
            "slug": self.slug,
            "category": self.category,
            "tags": list(self.tags),
            "description": self.description,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.meta()
        data["body"] = self.body
        data["html"] = self.html
        data["toc"] = [heading.to_dict() for heading in self.toc]
        return data
