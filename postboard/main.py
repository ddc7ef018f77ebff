# postboard/main.py

import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from postboard.api import auth, notifications, posts
from postboard.config import settings
from postboard.core.errors import PostboardError
from postboard.core.responses import send_error
from postboard.database import init_db


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

init_db()
os.makedirs(settings.images_dir, exist_ok=True)

app = FastAPI(title="Postboard API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(posts.router)
app.include_router(notifications.router)

app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")


# -------------------------------
# Error envelopes
# -------------------------------

def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "form", "query", "path")]
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{loc[-1]}: {msg}" if loc else msg)
    return messages


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    message = "Authentication failed" if request.url.path == "/login" else "Validation failed"
    return send_error(message, _validation_messages(exc), 401)


@app.exception_handler(PostboardError)
async def handle_postboard_error(request: Request, exc: PostboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return send_error(exc.message, exc.errors, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    response = send_error(str(exc.detail), None, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return send_error("Server error", [str(exc)], 500)


@app.get("/")
def root():
    return {"ok": True}
