"""FastAPI application exposing the checklist over HTTP."""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import NoReturn

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from checklist_plugin import __version__
from checklist_plugin.common.models import PlatformConfig
from checklist_plugin.common.store import ChecklistStore


class ApiServerError(RuntimeError):
    """The HTTP server could not start serving."""


def _reject_constant(value: str) -> NoReturn:
    raise ValueError(f"{value} is not valid JSON")


def create_app(store: ChecklistStore) -> FastAPI:
    app = FastAPI(
        title="Checklist API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        # 405 on /checklist is reported like any unknown route.
        if exc.status_code in {404, 405}:
            return PlainTextResponse("Not found.", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.get("/checklist")
    def get_checklist() -> JSONResponse:
        return JSONResponse(store.items())

    @app.post("/checklist")
    async def replace_checklist(request: Request) -> PlainTextResponse:
        body = await request.body()
        try:
            payload = json.loads(body, parse_constant=_reject_constant)
        except ValueError:
            return PlainTextResponse("Invalid JSON.", status_code=400)
        if not isinstance(payload, list):
            return PlainTextResponse("Invalid JSON.", status_code=400)
        store.replace(payload)
        return PlainTextResponse("Checklist updated.")

    return app


class ApiServer:
    """Serves the checklist API with uvicorn on a daemon thread."""

    def __init__(self, store: ChecklistStore, config: PlatformConfig, log: logging.Logger | None = None) -> None:
        self.app = create_app(store)
        self.config = config
        self.log = log or logging.getLogger(__name__)
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def port(self) -> int:
        """Bound port; differs from the configured one when that is 0."""
        if self._server is not None and self._server.started:
            for server in self._server.servers:
                for sock in server.sockets:
                    return sock.getsockname()[1]
        return self.config.port

    def start(self, timeout: float = 5.0) -> None:
        if self._thread is not None:
            return
        server_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(server_config)
        self._thread = threading.Thread(target=self._server.run, name="checklist-http", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started and self._thread.is_alive() and time.monotonic() < deadline:
            time.sleep(0.01)

        if not self._server.started:
            self.stop()
            self.log.error("HTTP server failed to start on %s:%d.", self.config.host, self.config.port)
            raise ApiServerError(f"Cannot serve checklist API on {self.config.host}:{self.config.port}")
        self.log.info("HTTP server listening on port %d.", self.port)

    def stop(self, timeout: float = 5.0) -> None:
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            self.log.warning("HTTP server thread did not exit within %.1fs.", timeout)
            return
        self._server = None
        self._thread = None
