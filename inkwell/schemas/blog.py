from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Metadata(BaseModel):
    title: str = ""
    date: str = ""
    tags: List[str] = Field(default_factory=list)
    summary: str = ""
    author: Optional[str] = None
    image: Optional[str] = None
    image_alt: Optional[str] = None
    keywords: Optional[str] = None
    canonical: Optional[str] = None
    github_repo: Optional[str] = None
    website: Optional[str] = None


class Post(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    summary: str
    date: str
    date_iso: str
    tags: List[str] = Field(default_factory=list)
    filename: str
    slug: str
    author: str
    image: str
    image_alt: str
    keywords: str
    canonical: str
    reading_time: int = Field(..., ge=1)
    word_count: int = Field(..., ge=0)
    github_repo: Optional[str] = None
    website: Optional[str] = None


class SearchResult(BaseModel):
    title: str
    slug: str
    summary: str
    date: str
    date_iso: str
    tags: List[str] = Field(default_factory=list)
    reading_time: int

    @classmethod
    def from_post(cls, post: Post) -> "SearchResult":
        return cls(
            title=post.title,
            slug=post.slug,
            summary=post.summary,
            date=post.date,
            date_iso=post.date_iso,
            tags=list(post.tags),
            reading_time=post.reading_time,
        )
