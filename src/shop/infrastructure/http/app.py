"""
FastAPI application for the shop backend.

Intended usage:
    uvicorn shop.infrastructure.http.app:create_app --factory --port 8080

or simply ``shop serve``.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from shop.application.publisher import PRODUCTS_EVENT
from shop.domain.exceptions import DomainException
from shop.infrastructure.bootstrap import Container, build_container
from shop.infrastructure.config import get_settings
from shop.infrastructure.http import carts, products
from shop.infrastructure.logging_setup import configure_logging
from shop.infrastructure.realtime.hub import RealtimeHub

logger = logging.getLogger("shop.http")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Without a container, settings are read from the environment, logging
    is configured and the stores for ``PERSIST_MODE`` are built with a
    fresh realtime hub as publisher.
    """
    if container is None:
        settings = get_settings()
        configure_logging(settings)
        container = build_container(settings, RealtimeHub())

    app = FastAPI(title="Shop API", version="0.1.0")
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainException)
    async def _domain_error(request: Request, exc: DomainException) -> JSONResponse:
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(level, "%s %s -> %d: %s", request.method, request.url.path,
                   exc.status_code, exc)
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(_describe(error) for error in exc.errors())
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, details)
        return JSONResponse(
            status_code=400, content={"message": f"Invalid request: {details}"}
        )

    @app.get("/health", tags=["system"])
    def health() -> Dict[str, Any]:
        return {"status": "ok", "persist_mode": container.settings.persist_mode}

    @app.get("/loggerTest", tags=["system"], response_class=PlainTextResponse)
    def logger_test() -> str:
        logger.debug("Debug log")
        logger.info("Info log")
        logger.warning("Warning log")
        logger.error("Error log")
        logger.critical("Fatal log - this is a critical error")
        return "Logs generated. Check the console and errors.log."

    if isinstance(container.publisher, RealtimeHub):
        _mount_realtime(app, container, container.publisher)

    app.include_router(products.router)
    app.include_router(carts.router)
    return app


def _describe(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def _mount_realtime(app: FastAPI, container: Container, hub: RealtimeHub) -> None:

    @app.websocket("/ws")
    async def realtime(websocket: WebSocket) -> None:
        await websocket.accept()
        listener = hub.connect()

        async def pump() -> None:
            while True:
                await websocket.send_json(await listener.next_message())

        sender = asyncio.create_task(pump())
        try:
            catalog = await run_in_threadpool(container.product_service.list_all)
            current = [p.to_record() for p in catalog]
            listener.offer({"event": PRODUCTS_EVENT, "payload": current})
            # Client messages are ignored; receiving only detects the disconnect.
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            hub.disconnect(listener)
            sender.cancel()
            # A failed send ends the pump early; its error is not re-raised.
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await sender
