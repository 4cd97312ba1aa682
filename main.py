import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config.database_config import ALLOWED_ORIGINS, FRONTEND_DIR, MAX_BODY_BYTES, PORT, UPLOAD_DIR
from config.logging_config import configure_logging
from routes import carousel, chat, counters, frontend
from utils.body_limit import BodySizeLimitMiddleware
from utils.dependencies import close_storage, get_storage
from utils.errors import ApiError, api_error_handler, request_validation_handler

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(app.state.upload_dir, exist_ok=True)
    if app.state.connect:
        get_storage()  # start connecting in the background
    yield
    if app.state.connect:
        close_storage()


def create_app(upload_dir: Optional[str] = None, frontend_dir: Optional[str] = None, connect: bool = True) -> FastAPI:
    upload_dir = upload_dir or UPLOAD_DIR
    frontend_dir = frontend_dir or FRONTEND_DIR

    app = FastAPI(title="Chatbot Content API", version="1.0.0", lifespan=lifespan)
    app.state.upload_dir = upload_dir
    app.state.frontend_dir = frontend_dir
    app.state.connect = connect

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)

    # Errors
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routes
    app.include_router(counters.router)
    app.include_router(chat.router)
    app.include_router(carousel.router)
    app.include_router(frontend.router)

    # Static files; the upload directory is created on startup
    app.mount("/uploads", StaticFiles(directory=upload_dir, check_dir=False), name="uploads")
    if os.path.isdir(frontend_dir):
        app.mount("/", StaticFiles(directory=frontend_dir), name="frontend")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"🚀 Server running on http://localhost:{PORT}")
    logger.info(f"📊 Visitor counter API: POST http://localhost:{PORT}/api/visitor")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
