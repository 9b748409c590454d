import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from api.decisions import router as decisions_router
from api.funding import router as funding_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("%s starting | log_level=%s", settings.app_name, settings.effective_log_level)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Funding eligibility classification and underwriting approval reconciliation API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(funding_router)
app.include_router(decisions_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
