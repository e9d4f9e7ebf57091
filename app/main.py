import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import ocr
from app.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Global OCR API",
    description="Fast, accurate OCR extraction for NID/BO/TIN/BANK using Gemini",
    version="1.0.0",
    docs_url="/api",
)

# CORS middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for noisy in ("httpx", "httpcore", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@app.on_event("startup")
async def startup_event():
    setup_logging()
    logger.info("OCR API started")


# Include routers
app.include_router(ocr.router, prefix="/api/ocr", tags=["OCR API"])


@app.get("/")
async def root():
    return {"message": "API is running."}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=HOST, port=PORT)
