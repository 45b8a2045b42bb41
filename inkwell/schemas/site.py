from pydantic import BaseModel
from pydantic.config import ConfigDict


class SiteConfig(BaseModel):
    """Site-wide defaults shared by every post in a build."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    url: str
    author: str
    language: str = "en"
    twitter_handle: str = ""
    logo: str = "/logo.png"
    default_image: str
