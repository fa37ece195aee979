# src/detection/patterns.py — v1
"""Pattern specs: the ways a media item can be referenced from a note.

A pattern spec is one of three frozen variants, each with a single
evaluator:

  - ExactEmbed: literal ``![[name]]`` embed of a known filename.
  - TemplatedEmbed: ``![[...]]`` embed matching a filename template
    (auto-generated timestamp names, renamed files keeping an id fragment).
  - ExternalLink: markdown image link to the configured external domain.

Specs are built fresh for every item on every detection call and never
persisted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Literal, Union

if TYPE_CHECKING:
    from mediaref.config.settings import Settings
    from mediaref.core.models import MediaItem

PatternKind = Literal["exact-embed", "templated-embed", "external-link"]

# Filename template used when the exporter names files by capture time.
TIMESTAMP_TEMPLATE = r"photo-\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}"

SHORT_ID_LENGTH = 8


@dataclass(frozen=True)
class ExactEmbed:
    kind: ClassVar[PatternKind] = "exact-embed"

    name: str

    @property
    def literal(self) -> str:
        return f"![[{self.name}]]"


@dataclass(frozen=True)
class TemplatedEmbed:
    kind: ClassVar[PatternKind] = "templated-embed"

    regex: re.Pattern[str]


@dataclass(frozen=True)
class ExternalLink:
    kind: ClassVar[PatternKind] = "external-link"

    regex: re.Pattern[str]


PatternSpec = Union[ExactEmbed, TemplatedEmbed, ExternalLink]


def evaluate(spec: PatternSpec, content: str) -> bool:
    """Return True if ``spec`` occurs anywhere in ``content``."""
    if isinstance(spec, ExactEmbed):
        return spec.literal in content
    if isinstance(spec, (TemplatedEmbed, ExternalLink)):
        return spec.regex.search(content) is not None
    raise TypeError(f"Unknown pattern spec: {spec!r}")


def generate_patterns(item: MediaItem, settings: Settings) -> list[PatternSpec]:
    """Build every pattern spec for one catalog item.

    Any single match marks the item as referenced.
    """
    ext = re.escape(item.extension)
    patterns: list[PatternSpec] = []

    # Original filename, with and without its extension.
    if item.filename:
        patterns.append(ExactEmbed(strip_extension(item.filename)))
        patterns.append(ExactEmbed(item.filename))

    patterns.append(
        TemplatedEmbed(re.compile(rf"!\[\[{TIMESTAMP_TEMPLATE}\.{ext}\]\]"))
    )

    short_id = short_identifier(item.id)
    if short_id:
        patterns.append(
            TemplatedEmbed(
                re.compile(
                    rf"!\[\[[^\]\n]*{re.escape(short_id)}[^\]\n]*\.{ext}\]\]"
                )
            )
        )

    domain = settings.external_domain
    if domain:
        prefix = rf"!\[[^\]\n]*\]\({re.escape(domain)}/(?:[^)\s]*/)?"
        if item.filename:
            patterns.append(
                ExternalLink(re.compile(rf"{prefix}{re.escape(item.filename)}\)"))
            )
        patterns.append(
            ExternalLink(re.compile(rf"{prefix}{re.escape(item.id)}\.{ext}\)"))
        )

    return patterns


def strip_extension(filename: str) -> str:
    """Drop the last extension; dotfiles such as ``.hidden`` are kept whole."""
    dot = filename.rfind(".")
    return filename[:dot] if dot > 0 else filename


def short_identifier(item_id: str) -> str:
    """First characters of the id's leading segment (ids look like ``UUID/L0/001``)."""
    return item_id.split("/")[0][:SHORT_ID_LENGTH]
