import textwrap

from inkwell.schemas.blog import Metadata
from inkwell.services.front_matter import (
    compose_document,
    parse_front_matter,
    parse_metadata,
    parse_tags,
)


def doc(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_parse_front_matter_splits_metadata_and_body():
    parsed = parse_front_matter(
        doc(
            """
            ---
            title: "Hello World"
            date: 2024-01-02
            summary: A short intro
            ---
            # Body

            Text.
            """
        )
    )

    assert parsed is not None
    assert parsed.metadata.title == "Hello World"
    assert parsed.metadata.date == "2024-01-02"
    assert parsed.metadata.summary == "A short intro"
    assert parsed.body == "\n# Body\n\nText.\n"


def test_document_without_front_matter_is_rejected():
    assert parse_front_matter("# Just markdown\n\nNo metadata here.") is None
    assert parse_metadata("---\ntitle: unterminated\n") is None


def test_tags_keep_order_and_strip_quotes():
    meta = parse_metadata('---\ntags: [rust, web, "axum blog"]\n---\nbody')
    assert meta.tags == ["rust", "web", "axum blog"]


def test_tags_accept_bare_comma_separated_string():
    assert parse_tags("python, 'web dev' ,, api ") == ["python", "web dev", "api"]


def test_missing_keys_use_defaults():
    meta = parse_metadata("---\ntitle: Only a title\n---\n")
    assert meta == Metadata(title="Only a title")
    assert meta.tags == []
    assert meta.summary == ""
    assert meta.author is None


def test_value_keeps_everything_after_first_colon():
    meta = parse_metadata('---\ntitle: "Rust: the good parts"\ncanonical: https://x.dev/a\n---\n')
    assert meta.title == "Rust: the good parts"
    assert meta.canonical == "https://x.dev/a"


def test_unknown_keys_are_ignored_and_homepage_aliases_website():
    meta = parse_metadata(
        doc(
            """
            ---
            title: Project
            layout: wide
            draft: true
            homepage: https://project.dev
            github_repo: https://github.com/me/project
            ---
            """
        )
    )
    assert meta.website == "https://project.dev"
    assert meta.github_repo == "https://github.com/me/project"


def test_optional_keys_are_decoded():
    meta = parse_metadata(
        doc(
            """
            ---
            author: Ada
            image: /img/cover.png
            image_alt: A cover
            keywords: one, two
            ---
            """
        )
    )
    assert meta.author == "Ada"
    assert meta.image == "/img/cover.png"
    assert meta.image_alt == "A cover"
    assert meta.keywords == "one, two"


def test_compose_document_parses_back():
    metadata = Metadata(
        title="Rust: the good parts",
        date="2024-03-04",
        tags=["rust", "web", "axum blog"],
        summary="",
        website="https://example.dev",
    )

    composed = compose_document(metadata, "\n# Heading\n\nSome text.\n")
    parsed = parse_front_matter(composed)

    assert composed.startswith("---\n")
    assert "tags: [rust, web, axum blog]" in composed
    assert parsed.metadata == metadata
    assert parsed.body.strip() == "# Heading\n\nSome text."


def test_compose_document_keeps_long_values_on_one_line():
    summary = " ".join(["lengthy"] * 60)
    metadata = Metadata(title="Long", date="2024-03-04", tags=["a"], summary=summary)

    composed = compose_document(metadata, "Body")

    assert f"summary: {summary}\n" in composed
    assert parse_front_matter(composed).metadata.summary == summary
