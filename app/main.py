from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn
import os

from app.api.endpoints import contact
from app.core.config import settings
from app.core.logging import setup_logging
import logging
import json

logger = logging.getLogger(__name__)

APP_DIR = os.path.dirname(__file__)
STATIC_DIR = os.path.join(APP_DIR, "static")

with open(os.path.join(APP_DIR, "log_config.json"), "r") as file:
    LOGGING_CONFIG = json.load(file)

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.mail_configured:
        logger.warning("MAIL_FROM/MAIL_PASS not set, the contact endpoint will return 500")
    logger.info(f"{settings.PROJECT_NAME} started")
    yield
    logger.info(f"{settings.PROJECT_NAME} stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Portfolio site with a contact form relayed to the owner's inbox over SMTP",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contact.router, prefix="/api", tags=["contact"])


@app.get("/", include_in_schema=False)
async def root():
    return FileResponse(os.path.join(STATIC_DIR, "index.html"))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Keep this handler for unmatched routes, it serves the 404 page
    if exc.status_code == 404:
        return FileResponse(os.path.join(STATIC_DIR, "404.html"), status_code=404)
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal server error"},
    )


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=LOGGING_CONFIG,
    )
