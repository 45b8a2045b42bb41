import datetime
import logging
from typing import Optional

from inkwell.schemas.blog import Metadata, Post
from inkwell.schemas.site import SiteConfig
from inkwell.utils import calculate_reading_time, slugify

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%B %d, %Y"
ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_date(
    date_str: str,
    modified: Optional[datetime.datetime] = None,
    now: Optional[datetime.datetime] = None,
) -> datetime.datetime:
    """
    Parse the author's `YYYY-MM-DD` as midnight UTC.
    Falls back to the file's mtime, then to the current time.
    """
    try:
        parsed = datetime.datetime.strptime(date_str.strip(), "%Y-%m-%d")
        return parsed.replace(tzinfo=datetime.timezone.utc)
    except ValueError:
        logger.debug(f"Unparseable post date {date_str!r}, using file time")

    fallback = modified or now or datetime.datetime.now(datetime.timezone.utc)
    if fallback.tzinfo is None:
        fallback = fallback.replace(tzinfo=datetime.timezone.utc)
    return fallback.astimezone(datetime.timezone.utc)


def summarize(body: str, length: int = 160) -> str:
    return body[:length] + "..."


def derive_keywords(tags, limit: int = 5) -> str:
    return ", ".join(tags[:limit])


def assemble_post(
    metadata: Metadata,
    html: str,
    body: str,
    filename: str,
    site: SiteConfig,
    modified: Optional[datetime.datetime] = None,
    now: Optional[datetime.datetime] = None,
    words_per_minute: int = 200,
    summary_length: int = 160,
) -> Post:
    """Combine parsed metadata, rendered HTML and file info into a Post."""
    date = resolve_date(metadata.date, modified=modified, now=now)
    reading_time, word_count = calculate_reading_time(body, words_per_minute)
    slug = slugify(metadata.title)
    tags = list(metadata.tags)

    return Post(
        title=metadata.title,
        content=html,
        summary=metadata.summary or summarize(body, summary_length),
        date=date.strftime(DISPLAY_DATE_FORMAT),
        date_iso=date.strftime(ISO_DATE_FORMAT),
        tags=tags,
        filename=filename,
        slug=slug,
        author=metadata.author or site.author,
        image=metadata.image or site.default_image,
        image_alt=metadata.image_alt or metadata.title,
        keywords=metadata.keywords or derive_keywords(tags),
        canonical=metadata.canonical or f"{site.url}/blog/{slug}",
        reading_time=reading_time,
        word_count=word_count,
        github_repo=metadata.github_repo,
        website=metadata.website,
    )
