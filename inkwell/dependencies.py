from fastapi import Depends

from inkwell.repos.posts_repo import FileSystemPostsRepo
from inkwell.services.posts_service import PostsService
from inkwell.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_posts_repo(current_settings: Settings = Depends(get_settings)):
    return FileSystemPostsRepo(current_settings.CONTENT_DIR)


def get_posts_service(
    repo=Depends(get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        site=current_settings.site,
        words_per_minute=current_settings.WORDS_PER_MINUTE,
        summary_length=current_settings.SUMMARY_LENGTH,
    )
