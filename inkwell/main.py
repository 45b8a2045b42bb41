import logging

from fastapi import FastAPI

from inkwell.routers import posts
from inkwell.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="inkwell API", description="Markdown blog content pipeline")

app.include_router(posts.router)


@app.get("/")
async def root():
    return {"message": "inkwell API is running"}
