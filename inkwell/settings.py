from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from inkwell.schemas.site import SiteConfig


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Site
    SITE_TITLE: str = "Aryan S Rao"
    SITE_DESCRIPTION: str = "My own blog page"
    SITE_URL: str = "http://localhost:8080"
    SITE_AUTHOR: str = "aryansrao"
    SITE_LANGUAGE: str = "en"
    SITE_TWITTER_HANDLE: str = "@aryansrao"
    SITE_LOGO: str = "/logo.png"

    # Content
    CONTENT_DIR: str = "content"
    HIGHLIGHT_STYLE: str = "monokai"
    WORDS_PER_MINUTE: int = 200
    SUMMARY_LENGTH: int = 160

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def site(self) -> SiteConfig:
        url = self.SITE_URL.rstrip("/")
        return SiteConfig(
            title=self.SITE_TITLE,
            description=self.SITE_DESCRIPTION,
            url=url,
            author=self.SITE_AUTHOR,
            language=self.SITE_LANGUAGE,
            twitter_handle=self.SITE_TWITTER_HANDLE,
            logo=self.SITE_LOGO,
            default_image=f"{url}/og-default.png",
        )


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
