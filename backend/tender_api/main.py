import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine

import tender_api.models  # noqa: F401 - register all tables for create_all
from tender_api.api.deps import verify_token
from tender_api.api.endpoints import bids, tenders
from tender_api.config import Settings
from tender_api.database import build_engine, build_session_factory
from tender_api.models.base import Base
from tender_api.schemas.common import describe_errors
from tender_api.services.exceptions import DomainError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("database schema ready")
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the API around an explicit settings value and database engine."""
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")

    app = FastAPI(title="Tender Management API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine if engine is not None else build_engine(settings.database_url)
    app.state.session_factory = build_session_factory(app.state.engine)

    @app.exception_handler(DomainError)
    async def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"reason": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"reason": describe_errors(exc.errors())})

    # Only expose exception text when DEBUG is on
    @app.exception_handler(Exception)
    async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        reason = str(exc) if settings.debug else "Internal Server Error"
        return JSONResponse(status_code=500, content={"reason": reason})

    @app.get("/api/ping", response_class=PlainTextResponse)
    def ping():
        """Health check for load balancers and readiness probes."""
        return "ok"

    app.include_router(tenders.router, prefix="/api", dependencies=[Depends(verify_token)])
    app.include_router(bids.router, prefix="/api", dependencies=[Depends(verify_token)])
    return app


def serve() -> None:
    import uvicorn

    settings = Settings.from_env()
    host, port = settings.host_port
    uvicorn.run(create_app(settings), host=host, port=port)


app = create_app()
