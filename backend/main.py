# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Listkeeper HTTP entry point.

Run from the backend/ directory:
    uvicorn main:app --host 0.0.0.0 --port 8000

What is wired here
------------------
* CORS for the browser client.
* One log line per request (never the body: it may hold unlock passwords).
* The account router, the three resource routers and the task routers.
* A handler turning a row with a broken privacy state into a logged 500.
* GET /health for liveness probes.
"""

import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from access.privacy import CorruptPrivacyState
from auth.router import router as auth_router
from resources.router import (
    lists_router,
    notes_router,
    preset_tasks_router,
    presets_router,
    tasks_router,
)
from core.logger import logger

app = FastAPI(title="Listkeeper", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# The web client is served by its own dev server on :3000.  Replace with the
# deployed origin in production.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


class _AccessLogMiddleware(BaseHTTPMiddleware):
    """method path | client status latency"""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response: Response = await call_next(request)
        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            request.client.host if request.client else "unknown",
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


app.add_middleware(_AccessLogMiddleware)


@app.exception_handler(CorruptPrivacyState)
async def _corrupt_privacy_state(request: Request, exc: CorruptPrivacyState):
    # A stored row breaks the hash/owner rules; refuse rather than guess
    logger.error("corrupt privacy state on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Stored resource is in an inconsistent state."},
    )


for _router in (
    auth_router,
    lists_router,
    presets_router,
    notes_router,
    tasks_router,
    preset_tasks_router,
):
    app.include_router(_router)


@app.on_event("startup")
async def _on_startup():
    logger.info("Listkeeper API ready")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Listkeeper API stopped")


@app.get("/health")
def health():
    return {"status": "ok"}
