import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from core.config import DEMO_MODE, LOG_LEVEL
from db.base import Base
from db.session import SessionLocal, get_engine
from models import FacebookAdArchive
from routers.metrics import router as metrics_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Marketing Correlation API")


@app.on_event("startup")
def startup() -> None:
    if not DEMO_MODE:
        return
    Base.metadata.create_all(bind=get_engine())
    db = SessionLocal()
    try:
        if db.scalar(select(FacebookAdArchive.id).limit(1)) is None:
            from core.mock_data import seed_demo_data

            seed_demo_data(db)
            logger.info("Seeded demo marketing data")
    finally:
        db.close()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(metrics_router, prefix="/metrics")


@app.get("/healthz")
def healthz():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
