"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from designirl.config import settings
from designirl.errors import DesignIRLError, InvalidTransition

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.designirl_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


async def _design_error_handler(request: Request, exc: DesignIRLError) -> JSONResponse:
    status = 409 if isinstance(exc, InvalidTransition) else 400
    return JSONResponse(status_code=status, content={"detail": exc.message, "kind": exc.kind})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Design IRL",
        description="Pinterest taste analysis and AI room generation, editing and virtual try-on",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DesignIRLError, _design_error_handler)

    from designirl.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
