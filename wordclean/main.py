import logging

from fastapi import FastAPI

from wordclean.config import settings
from wordclean.routes.normalize import router as normalize_router

logging.basicConfig(level=settings.LOG_LEVEL.upper())

app = FastAPI(title="wordclean API", version="1.0.0")


@app.get("/")
def root():
    return {"message": "wordclean API is running", "version": "1.0.0"}


@app.get("/health")
def health():
    return {"status": "healthy"}


app.include_router(normalize_router)
