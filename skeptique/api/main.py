import logging
import os
import time

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skeptique.feeds import NewsApiFeed
from skeptique.storage.cache import StoryCache
from skeptique.storage.repository import StoryRepository
from skeptique.summarizer.llm_synthesizer import OpenRouterSynthesizer
from skeptique.tracker.story_tracker import QueryTopic, SeedTopic, StoryTracker
from skeptique.utils.logging_util import setup_logging


STORY_TTL_MINUTES = 30      # validade de uma síntese em cache
NEWS_PAGE_SIZE = 8          # artigos por fetch
MIN_QUERY_LENGTH = 2        # mínimo de caracteres (sem espaços) na busca

# Carrega variáveis do .env
load_dotenv()

setup_logging(os.getenv("SKEPTIQUE_LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

repository = StoryRepository.from_file()
cache = StoryCache(ttl_seconds=STORY_TTL_MINUTES * 60)
tracker = StoryTracker(
    feed=NewsApiFeed.from_env(page_size=NEWS_PAGE_SIZE),
    synthesizer=OpenRouterSynthesizer.from_env(),
    cache=cache,
)

#%% APP

app = FastAPI(title="Skeptique")

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # corpo de erro sempre no formato {"error": "..."}
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.get("/")
def root():
    return {"message": "Skeptique backend running"}


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}


@app.get("/stories")
def list_stories():
    return [s.model_dump(by_alias=True) for s in repository.list_summaries()]


@app.get("/stories/{story_id}")
def get_story(story_id: str):
    story = repository.get(story_id)
    if story is None:
        raise HTTPException(404, "Not found")

    result = tracker.build(SeedTopic(story))
    if not result.is_ok:
        # sem dados ao vivo: devolve a story seed como está
        logger.info("Serving seed story '%s' (%s)", story_id, result.reason)
        return story.model_dump(by_alias=True, exclude_unset=True)
    return result.value.model_dump(by_alias=True)


@app.get("/search/story")
def search_story(q: str = Query("")):
    query = q.strip()
    if len(query) < MIN_QUERY_LENGTH:
        raise HTTPException(400, "Query too short")

    try:
        result = tracker.build(QueryTopic(query))
        payload = result.value.model_dump(by_alias=True) if result.is_ok else None
    except Exception:
        logger.exception("Search story failed for '%s'", query)
        raise HTTPException(500, "Search story failed")

    if payload is None:
        logger.info("No articles for search '%s' (%s)", query, result.reason)
        raise HTTPException(404, "No articles found")
    return payload


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("skeptique.api.main:app", host="0.0.0.0", port=3000, reload=True)
