import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from inkwell import dependencies as deps
from inkwell.schemas.blog import Post, SearchResult
from inkwell.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[Post])
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all posts, newest first."""
    try:
        return service.list_posts()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=Post)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/tags/{tag}", response_model=List[Post])
def list_posts_by_tag(
    tag: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        return service.posts_by_tag(tag)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts tagged {tag}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/search", response_model=Dict[str, List[SearchResult]])
def search_posts(
    q: str = Query(default=""),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Match the query against title, summary, tags and post text."""
    try:
        return {"results": service.search(q)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Search failed for {q!r}: {e}")
        raise HTTPException(status_code=500, detail="Search failed")
