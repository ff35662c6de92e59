from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from case_retrieval.api.routers.retrieval import router as retrieval_router
from case_retrieval.core.config import settings
from case_retrieval.core.errors import RetrievalError
from case_retrieval.core.logging_config import configure_logging
from case_retrieval.core.sample_corpus import SAMPLE_PASSAGES
from case_retrieval.services.retrieval_service import RetrievalService

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_SAMPLE_CORPUS:
        logger.info("Initializing vector index from sample corpus...")
        try:
            await run_in_threadpool(RetrievalService.instance().rebuild, SAMPLE_PASSAGES)
            logger.info("✓ Vector index ready for question answering")
        except RetrievalError as e:
            logger.error(f"❌ Vector index init failed: {e.name}: {e.message}")
    yield
    RetrievalService.close_instance()


app = FastAPI(title="Case Retrieval", lifespan=lifespan)

app.include_router(retrieval_router, prefix="/retrieval", tags=["retrieval"])
