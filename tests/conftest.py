import datetime
import textwrap

from inkwell.repos.posts_repo import SourceDocument
from inkwell.schemas.site import SiteConfig

SITE = SiteConfig(
    title="Test Blog",
    description="A blog for tests",
    url="https://blog.example.com",
    author="site-author",
    default_image="https://blog.example.com/og-default.png",
)


def make_document(
    filename: str, text: str, modified: datetime.datetime | None = None
) -> SourceDocument:
    """Build a SourceDocument from an indented triple-quoted markdown string."""
    return SourceDocument(
        filename=filename,
        raw=textwrap.dedent(text).lstrip().encode("utf-8"),
        modified=modified,
    )


class FakeRepo:
    """
    Minimal in-memory storage stand-in used in service tests.
    """

    def __init__(self, documents=None):
        self.documents = {d.filename: d for d in documents or []}
        self.writes = []

    def list_documents(self):
        return list(self.documents.values())

    def get_document(self, filename: str):
        return self.documents.get(filename)

    def write_document(self, filename: str, data: bytes):
        self.writes.append((filename, data))
        self.documents[filename] = SourceDocument(filename=filename, raw=data)


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        by_tag_return=None,
        search_return=None,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._by_tag_return = by_tag_return or []
        self._search_return = search_return or []
        self.calls = []

    def list_posts(self):
        return self._list_posts_return

    def get_post(self, slug: str):
        self.calls.append(("get_post", slug))
        return self._get_post_return

    def posts_by_tag(self, tag: str):
        self.calls.append(("posts_by_tag", tag))
        return self._by_tag_return

    def search(self, query: str):
        self.calls.append(("search", query))
        return self._search_return
