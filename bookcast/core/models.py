"""
Entities produced by the generation pipeline, plus the wire schemas used to
validate structured provider output before it becomes an entity.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class OutlineItem:
    """One section of the script outline; a unit of work for the story stage."""
    index: int
    title: str
    focus: str
    actions: List[str]

    def __post_init__(self):
        if not self.actions:
            raise ValueError(f"Outline item {self.index} must have at least one action")


@dataclass(frozen=True)
class StoryBlock:
    """Story text for one outline item or one uploaded chunk."""
    index: int
    title: str
    content: str


@dataclass(frozen=True)
class ScriptBlock:
    """Review/audio script for one story block. ``chars`` always equals ``len(text)``."""
    index: int
    chapter: str
    text: str
    chars: Optional[int] = None

    def __post_init__(self):
        if self.chars is None:
            object.__setattr__(self, "chars", len(self.text))
        elif self.chars != len(self.text):
            raise ValueError(
                f"Script block {self.index}: chars={self.chars} does not match text length {len(self.text)}"
            )


@dataclass(frozen=True)
class SEOResult:
    """Titles, hashtags, keywords and description for the video listing."""
    titles: List[str] = field(default_factory=list)
    hashtags: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    description: str = ""


# Wire schemas for structured provider output

class OutlineItemPayload(BaseModel):
    title: str
    focus: str
    actions: List[str] = Field(min_length=1)

    def to_item(self, index: int) -> OutlineItem:
        return OutlineItem(index=index, title=self.title, focus=self.focus, actions=list(self.actions))


class SEOPayload(BaseModel):
    titles: List[str]
    hashtags: List[str]
    keywords: List[str]
    description: str

    def to_result(self) -> SEOResult:
        return SEOResult(
            titles=list(self.titles),
            hashtags=list(self.hashtags),
            keywords=list(self.keywords),
            description=self.description
        )


# Response schemas for list-shaped replies. google-genai only accepts builtin
# generics here, not typing.List.
OUTLINE_SCHEMA = list[OutlineItemPayload]
STRING_LIST_SCHEMA = list[str]
