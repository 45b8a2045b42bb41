import datetime
import logging
from typing import Callable, List, Optional

from inkwell.repos.posts_repo import SourceDocument
from inkwell.schemas.blog import Metadata, Post, SearchResult
from inkwell.schemas.site import SiteConfig
from inkwell.services.front_matter import (
    compose_document,
    parse_front_matter,
    parse_metadata,
)
from inkwell.services.markdown_renderer import render_markdown
from inkwell.services.post_assembler import assemble_post
from inkwell.utils import slugify, strip_html_tags

logger = logging.getLogger(__name__)


class PostsService:
    def __init__(
        self,
        repo,
        site: SiteConfig,
        renderer: Callable[[str], str] = render_markdown,
        words_per_minute: int = 200,
        summary_length: int = 160,
    ):
        self.repo = repo
        self.site = site
        self.renderer = renderer
        self.words_per_minute = words_per_minute
        self.summary_length = summary_length

    def list_posts(self) -> List[Post]:
        """Build every post from storage, newest first."""
        posts = []
        for document in self.repo.list_documents():
            post = parse_post_data(
                document,
                site=self.site,
                renderer=self.renderer,
                words_per_minute=self.words_per_minute,
                summary_length=self.summary_length,
            )
            if post:
                posts.append(post)

        # date_iso is zero-padded so string order is date order
        posts.sort(key=lambda p: p.date_iso, reverse=True)
        return posts

    def get_post(self, slug: str) -> Optional[Post]:
        return next((p for p in self.list_posts() if p.slug == slug), None)

    def posts_by_tag(self, tag: str) -> List[Post]:
        wanted = tag.lower()
        return [
            p for p in self.list_posts() if any(t.lower() == wanted for t in p.tags)
        ]

    def search(self, query: str) -> List[SearchResult]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            SearchResult.from_post(p)
            for p in self.list_posts()
            if needle in search_text(p)
        ]

    def save_post(
        self,
        metadata: Metadata,
        body: str,
        slug: Optional[str] = None,
        today: Optional[datetime.date] = None,
    ) -> str:
        """
        Write a post back to storage as `{slug}.md` and return the slug.
        When editing, the stored date, github_repo and website are kept
        unless the new metadata sets them.
        """
        slug = slug or slugify(metadata.title)
        if not slug:
            raise ValueError("Post title must contain at least one letter or digit")
        filename = f"{slug}.md"

        existing = _existing_metadata(self.repo.get_document(filename))
        updates = {}
        if not metadata.date:
            if existing and existing.date:
                updates["date"] = existing.date
            else:
                updates["date"] = (today or datetime.date.today()).isoformat()
        if existing:
            if metadata.github_repo is None and existing.github_repo:
                updates["github_repo"] = existing.github_repo
            if metadata.website is None and existing.website:
                updates["website"] = existing.website
        if updates:
            metadata = metadata.model_copy(update=updates)

        document = compose_document(metadata, body)
        self.repo.write_document(filename, document.encode("utf-8"))
        return slug


def parse_post_data(
    document: SourceDocument,
    *,
    site: SiteConfig,
    renderer: Callable[[str], str] = render_markdown,
    words_per_minute: int = 200,
    summary_length: int = 160,
) -> Optional[Post]:
    """Run one document through the pipeline. None means skip it."""
    try:
        text = document.raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning(f"Skipping {document.filename}: not valid UTF-8")
        return None

    parsed = parse_front_matter(text)
    if parsed is None:
        logger.debug(f"Skipping {document.filename}: no front matter")
        return None

    return assemble_post(
        parsed.metadata,
        renderer(parsed.body),
        parsed.body,
        document.filename,
        site,
        modified=document.modified,
        words_per_minute=words_per_minute,
        summary_length=summary_length,
    )


def search_text(post: Post) -> str:
    """Lower-cased text a search query is matched against."""
    return " ".join(
        [post.title, post.summary, " ".join(post.tags), strip_html_tags(post.content)]
    ).lower()


def _existing_metadata(document: Optional[SourceDocument]) -> Optional[Metadata]:
    if document is None:
        return None
    return parse_metadata(document.raw.decode("utf-8", errors="replace"))
