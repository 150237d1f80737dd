import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import db
from app.routes.predictions import router as predictions_router
from config.settings import settings

# Logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("pick5")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    db.init_db()
    logger.info("DB lista en %s", db.DB_PATH)
    yield


app = FastAPI(
    title="PICK5",
    description="API de predicciones 1X2 diarias (top 5 por confianza)",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(predictions_router, prefix="/api", tags=["predictions"])


@app.get("/health")
def health():
    return {"ok": True, "debug": settings.debug, "last_updated": db.get_last_updated()}
