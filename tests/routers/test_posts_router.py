from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from inkwell import dependencies as deps
from inkwell.routers import posts
from inkwell.schemas.blog import Post, SearchResult
from tests.conftest import FakePostsService


def make_post(slug: str, title: str, date_iso: str = "2024-01-01T00:00:00+0000") -> Post:
    return Post(
        title=title,
        content="<p>hi</p>",
        summary="hi...",
        date="January 01, 2024",
        date_iso=date_iso,
        tags=["rust"],
        filename=f"{slug}.md",
        slug=slug,
        author="me",
        image="https://blog.example.com/og-default.png",
        image_alt=title,
        keywords="rust",
        canonical=f"https://blog.example.com/blog/{slug}",
        reading_time=1,
        word_count=1,
    )


def make_app(fake_service: FakePostsService):
    app = FastAPI()
    app.dependency_overrides[deps.get_posts_service] = lambda: fake_service
    app.include_router(posts.router)
    return app


def test_list_posts_returns_posts_in_service_order():
    fake_posts = [
        make_post("second", "Second", "2024-01-02T00:00:00+0000"),
        make_post("first", "First"),
    ]
    client = TestClient(make_app(FakePostsService(list_posts_return=fake_posts)))

    res = client.get("/posts")

    assert res.status_code == 200
    body = res.json()
    assert [p["slug"] for p in body] == ["second", "first"]
    assert set(body[0]) >= {
        "title",
        "content",
        "summary",
        "date",
        "date_iso",
        "tags",
        "slug",
        "author",
        "image",
        "image_alt",
        "keywords",
        "canonical",
        "reading_time",
        "word_count",
        "github_repo",
        "website",
    }


def test_get_post_returns_404_when_missing():
    client = TestClient(make_app(FakePostsService(get_post_return=None)))

    res = client.get("/posts/missing")

    assert res.status_code == 404
    assert res.json()["detail"] == "Post not found"


def test_get_post_success():
    service = FakePostsService(get_post_return=make_post("hello", "Hello"))
    client = TestClient(make_app(service))

    res = client.get("/posts/hello")

    assert res.status_code == 200
    assert res.json()["slug"] == "hello"
    assert service.calls == [("get_post", "hello")]


def test_tag_route_passes_tag_through():
    service = FakePostsService(by_tag_return=[make_post("a", "A")])
    client = TestClient(make_app(service))

    res = client.get("/tags/Rust")

    assert res.status_code == 200
    assert [p["slug"] for p in res.json()] == ["a"]
    assert service.calls == [("posts_by_tag", "Rust")]


def test_search_wraps_results():
    result = SearchResult.from_post(make_post("a", "A"))
    service = FakePostsService(search_return=[result])
    client = TestClient(make_app(service))

    res = client.get("/search", params={"q": "rust"})

    assert res.status_code == 200
    assert res.json() == {"results": [result.model_dump()]}
    assert "content" not in res.json()["results"][0]
    assert service.calls == [("search", "rust")]


def test_search_without_query_passes_empty_string():
    service = FakePostsService()
    client = TestClient(make_app(service))

    res = client.get("/search")

    assert res.json() == {"results": []}
    assert service.calls == [("search", "")]


def test_list_posts_passes_through_http_exception():
    class BoomService(FakePostsService):
        def list_posts(self):
            raise HTTPException(status_code=418, detail="teapot")

    client = TestClient(make_app(BoomService()))

    res = client.get("/posts")
    assert res.status_code == 418
    assert res.json()["detail"] == "teapot"


def test_list_posts_returns_500_on_unexpected_error():
    class BoomService(FakePostsService):
        def list_posts(self):
            raise RuntimeError("boom")

    client = TestClient(make_app(BoomService()))

    res = client.get("/posts")
    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to retrieve posts"
