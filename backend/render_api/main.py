from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router
from .core.config import Settings, get_settings
from .core.logging_config import setup_logging
from .core.middleware import bearer_auth_middleware, performance_middleware
from .services.pipeline import RenderPipeline

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, pipeline: Optional[RenderPipeline] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Also runs when served as `uvicorn render_api.main:app`
        setup_logging(settings)
        logger.info(f"render-api started ({settings.environment})")
        yield

    app = FastAPI(title="render-api", lifespan=lifespan)

    app.state.settings = settings
    app.state.render_pipeline = pipeline or RenderPipeline(settings)

    # Later registrations wrap earlier ones: CORS, then request timing, then the auth gate
    app.middleware("http")(bearer_auth_middleware(settings.auth_token))
    app.middleware("http")(performance_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


def run():
    settings = get_settings()
    setup_logging(settings)
    logger.info(f"render-api listening on :{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
