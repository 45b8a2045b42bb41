import logging
from dataclasses import dataclass
from typing import List, Optional

import frontmatter

from inkwell.schemas.blog import Metadata

logger = logging.getLogger(__name__)

DELIMITER = "---"

# libyaml's emitter takes an integer width only
YAML_LINE_WIDTH = 2**31 - 1

_OPTIONAL_KEYS = (
    "author",
    "image",
    "image_alt",
    "keywords",
    "canonical",
    "github_repo",
    "website",
)
_KEY_ALIASES = {"homepage": "website"}


@dataclass(frozen=True)
class ParsedDocument:
    metadata: Metadata
    body: str


def parse_front_matter(text: str) -> Optional[ParsedDocument]:
    """
    Split a document into its metadata block and markdown body.

    Returns None when the document has no delimited block, which callers
    treat as "skip this file".
    """
    parts = text.split(DELIMITER, 2)
    if len(parts) < 3:
        return None
    return ParsedDocument(metadata=_decode_metadata(parts[1]), body=parts[2])


def parse_metadata(text: str) -> Optional[Metadata]:
    parsed = parse_front_matter(text)
    return parsed.metadata if parsed else None


def _decode_metadata(block: str) -> Metadata:
    fields = {}
    for line in block.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        key = _KEY_ALIASES.get(key, key)
        value = _strip_quotes(value)

        if key == "tags":
            fields["tags"] = parse_tags(value)
        elif key in ("title", "date", "summary") or key in _OPTIONAL_KEYS:
            fields[key] = value
        # Unknown keys are ignored so newer documents still load.
    return Metadata(**fields)


def _strip_quotes(value: str) -> str:
    value = value.strip().strip('"')
    if len(value) >= 2 and value[0] == value[-1] == "'":
        # YAML single-quoted scalar, '' is an escaped quote
        value = value[1:-1].replace("''", "'")
    return value


def parse_tags(value: str) -> List[str]:
    """Accept both `[a, "b"]` and `a, b` forms, keeping order."""
    cleaned = value.strip("[]")
    tags = []
    for item in cleaned.split(","):
        tag = item.strip().strip('"').strip("'")
        if tag:
            tags.append(tag)
    return tags


def compose_document(metadata: Metadata, body: str) -> str:
    """Serialize metadata and body back into a front-matter document."""
    values = {
        "title": metadata.title,
        "date": metadata.date,
        "tags": list(metadata.tags),
        "summary": metadata.summary,
    }
    for key in _OPTIONAL_KEYS:
        value = getattr(metadata, key)
        if value is not None:
            values[key] = value

    post = frontmatter.Post(body.strip("\n"), **values)
    # Flow style keeps `tags: [a, b]` on a single line for the line-based parser.
    document = frontmatter.dumps(
        post, default_flow_style=None, sort_keys=False, width=YAML_LINE_WIDTH
    )
    logger.debug(f"Composed document '{metadata.title}' ({len(document)} chars)")
    return document + "\n"
