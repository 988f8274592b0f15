"""Document contracts - frontmatter values, typed frontmatter, documents."""

import re
from datetime import date
from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Depth(str, Enum):
    """Depth tier of a document within its topic."""

    SURFACE = "surface"
    MID_DEPTH = "mid-depth"
    DEEP_WATER = "deep-water"


DEPTH_ORDER: tuple[Depth, ...] = (Depth.SURFACE, Depth.MID_DEPTH, Depth.DEEP_WATER)


# =============================================================================
# Raw frontmatter values
# =============================================================================


class StringValue(BaseModel):
    kind: Literal["string"] = "string"
    value: str


class StringListValue(BaseModel):
    kind: Literal["string_list"] = "string_list"
    value: list[str]


class IntegerValue(BaseModel):
    kind: Literal["integer"] = "integer"
    value: int


class DateValue(BaseModel):
    kind: Literal["date"] = "date"
    value: date


class UnsupportedValue(BaseModel):
    """A YAML value outside the supported shapes (float, bool, mapping...)."""

    kind: Literal["unsupported"] = "unsupported"
    type_name: str
    text: str


FrontmatterValue = Annotated[
    StringValue | StringListValue | IntegerValue | DateValue | UnsupportedValue,
    Field(discriminator="kind"),
]


# =============================================================================
# Typed frontmatter
# =============================================================================


class Frontmatter(BaseModel):
    """
    Frontmatter of a single document.

    `raw` keeps every key in source order as a tagged value. The typed fields
    are decoded from it on a best-effort basis: anything that does not decode
    is left as None (or an empty list) and reported by validation.
    """

    raw: dict[str, FrontmatterValue] = Field(
        default_factory=dict, description="Raw key/value pairs in source order"
    )

    title: str | None = Field(default=None, description="Human-readable title")
    phase: str | None = Field(default=None, description="Curriculum phase slug")
    topic: str | None = Field(default=None, description="Topic slug")
    depth: Depth | None = Field(default=None, description="Depth tier")
    reading_time: int | None = Field(
        default=None, description="Advisory reading time in minutes"
    )
    prerequisites: list[str] = Field(
        default_factory=list, description="References to documents to read first"
    )
    related_topics: list[str] = Field(
        default_factory=list, description="Topic slugs for lateral reading"
    )
    personas: list[str] = Field(
        default_factory=list, description="Reader persona tags (inert)"
    )
    updated: date | None = Field(default=None, description="Last revision date")

    type: str | None = Field(default=None, description="Content type")
    domain: str | None = Field(default=None, description="Subject domain")
    industry: str | None = Field(default=None, description="Industry focus")
    keywords: list[str] = Field(default_factory=list, description="SEO keywords")


class Document(BaseModel):
    """One markdown file of the corpus."""

    path: str = Field(description="Corpus-relative POSIX path, unique per document")
    frontmatter: Frontmatter = Field(description="Parsed frontmatter")
    body: str = Field(default="", description="Markdown body after frontmatter")

    @property
    def title(self) -> str | None:
        return self.frontmatter.title

    @property
    def phase(self) -> str | None:
        return self.frontmatter.phase

    @property
    def topic(self) -> str | None:
        return self.frontmatter.topic

    @property
    def depth(self) -> Depth | None:
        return self.frontmatter.depth

    @property
    def reading_time(self) -> int | None:
        return self.frontmatter.reading_time

    @property
    def prerequisites(self) -> list[str]:
        return self.frontmatter.prerequisites

    @property
    def related_topics(self) -> list[str]:
        return self.frontmatter.related_topics

    @property
    def personas(self) -> list[str]:
        return self.frontmatter.personas

    @property
    def slug(self) -> str | None:
        """`<topic>-<depth>`, the form prerequisites use to name documents."""
        if self.topic is None or self.depth is None:
            return None
        return f"{self.topic}-{self.depth.value}"

    @property
    def location(self) -> tuple[str, str, str] | None:
        """(phase, topic, depth) taken from a `<phase>/<topic>/<depth>/index.md` path."""
        parts = PurePosixPath(self.path).parts
        if len(parts) < 4 or parts[-1] != "index.md":
            return None
        phase, topic, depth = parts[-4:-1]
        if depth not in {d.value for d in Depth}:
            return None
        return phase, topic, depth


class DocumentRef(BaseModel):
    """Compact reference to a document, used in reports and navigation."""

    path: str
    title: str | None = None
    phase: str | None = None
    topic: str | None = None
    depth: Depth | None = None

    @classmethod
    def of(cls, document: Document) -> "DocumentRef":
        return cls(
            path=document.path,
            title=document.title,
            phase=document.phase,
            topic=document.topic,
            depth=document.depth,
        )


SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


__all__ = [
    "Depth",
    "DEPTH_ORDER",
    "StringValue",
    "StringListValue",
    "IntegerValue",
    "DateValue",
    "UnsupportedValue",
    "FrontmatterValue",
    "Frontmatter",
    "Document",
    "DocumentRef",
    "SLUG_PATTERN",
]
