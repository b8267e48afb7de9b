"""
FastAPI application factory.

The app owns nothing global: the LinkManager and CommandDispatcher are
created here (or passed in) and hung on `app.state`.

Lifecycle
---------

::

    startup  → link.start()    (failure logged; first request retries)
    requests → dispatcher → link.send()
    shutdown → link.close()    (later sends fail with DisconnectedError)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledbridge.dispatcher import CommandDispatcher
from ledbridge.link import LinkManager
from ledbridge.models import BridgeConfig

from .routes import router

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the LED strip controller bridge."


def create_app(config: BridgeConfig, link: Optional[LinkManager] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        config: Bridge configuration (serial settings, static_dir)
        link: Link manager to use. Built from config when omitted.

    Returns:
        Configured FastAPI app
    """
    link = link or LinkManager.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        link.start()
        try:
            yield
        finally:
            link.close()

    app = FastAPI(title="ledbridge", lifespan=lifespan)
    app.state.config = config
    app.state.link = link
    app.state.dispatcher = CommandDispatcher(link)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            target = request.url.path
            if request.url.query:
                target += f"?{request.url.query}"
            logger.info(f"Unknown path requested: {target}")
            return PlainTextResponse(f"Sorry, '{target}' is not a valid path.", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    app.include_router(router)

    # Mounted last so the command routes take precedence
    if config.static_dir is not None:
        logger.info(f"Serving static files from {config.static_dir}")
        app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")
    else:
        @app.get("/", response_class=PlainTextResponse)
        def index():
            return WELCOME_MESSAGE

    return app
