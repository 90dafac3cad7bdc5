"""HTTP transport used by the editor extension.

Each request body is one JSON cell record; the response body is the output of
that cell (or an error message) as plain text. Errors are reported in the
body with status 200 because the extension renders whatever it receives.
"""

from __future__ import annotations

import logging
import threading

from fastapi import BackgroundTasks, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
import uvicorn

from .session import Reply, Session

logger = logging.getLogger(__name__)


def create_app(session: Session, *, reformat: bool = True) -> FastAPI:
    app = FastAPI(title="gobook kernel")
    # Held for a whole submission so the store is never rebuilt concurrently.
    lock = threading.Lock()

    def _submit(data: bytes) -> Reply:
        with lock:
            return session.submit_payload(data)

    def _reformat() -> None:
        with lock:
            session.reformat()

    @app.api_route("/", methods=["GET", "POST"])
    async def execute(request: Request, background_tasks: BackgroundTasks) -> Response:
        data = await request.body()
        reply = await run_in_threadpool(_submit, data)
        if reformat and reply.persisted:
            background_tasks.add_task(_reformat)
        return Response(content=reply.body, media_type="text/plain; charset=utf-8")

    return app


def serve(session: Session, host: str, port: int, *, reformat: bool = True, log_level: str = "info") -> None:
    app = create_app(session, reformat=reformat)
    logger.info("Kernel running on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
