"""Metadata derived from a note's markdown content.

Title, description and tags are never stored; they are computed from the
revision content whenever a note is projected.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_FRONTMATTER_FENCE = "---"
_HEADING_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
# "#tag" preceded by start/whitespace; "# Heading" has a space so never matches
_HASHTAG_PATTERN = re.compile(r"(?:(?<=\s)|^)#([A-Za-z0-9_][\w-]*)", re.MULTILINE)


@dataclass
class DocumentMetadata:
    """Metadata extracted from markdown."""

    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)


def split_frontmatter(content: str) -> Tuple[Optional[str], str]:
    """Split ``---`` fenced front matter from the body.

    Returns (frontmatter_text or None, body).
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].strip() != _FRONTMATTER_FENCE:
        return None, content

    for index in range(1, len(lines)):
        if lines[index].strip() == _FRONTMATTER_FENCE:
            return "".join(lines[1:index]), "".join(lines[index + 1:])
    return None, content


def _parse_frontmatter(raw: str) -> dict:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        # front matter is user content; a typo must not break reads
        logger.debug(f"Ignoring malformed front matter: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _normalize_tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, (list, tuple)):
        candidates = [str(item) for item in value if item is not None]
    else:
        candidates = [str(value)]
    return [tag.strip().lower() for tag in candidates if tag and tag.strip()]


def extract_hashtags(text: str) -> List[str]:
    """Extract ``#hashtags`` from text, in order of appearance."""
    return [tag.lower() for tag in _HASHTAG_PATTERN.findall(text)]


def extract_document_metadata(content: str) -> DocumentMetadata:
    """Derive title, description and tags from markdown content."""
    raw_frontmatter, body = split_frontmatter(content or "")
    frontmatter = _parse_frontmatter(raw_frontmatter) if raw_frontmatter else {}

    title = frontmatter.get("title")
    if title is not None:
        title = str(title).strip() or None
    if title is None:
        match = _HEADING_PATTERN.search(body)
        if match:
            title = match.group(1).strip() or None

    description = frontmatter.get("description")
    if description is not None:
        description = str(description).strip() or None

    # de-duplicate, keeping first occurrence
    tags: List[str] = []
    for tag in _normalize_tags(frontmatter.get("tags")) + extract_hashtags(body):
        if tag not in tags:
            tags.append(tag)

    return DocumentMetadata(title=title, description=description, tags=tags)
