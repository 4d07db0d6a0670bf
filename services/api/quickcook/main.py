# QuickCook API Main Entry Point
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import Datastore
from .errors import QuickCookError, ValidationFailed
from .routers.auth import router as auth_router
from .routers.ingredients import router as ingredients_router
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .settings import Settings, settings as default_settings

# Configure structured logging
logging.basicConfig(
    level=default_settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("quickcook")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _missing_fields(exc: RequestValidationError) -> list[str]:
    fields = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            continue
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc:
            fields.append(".".join(loc))
    return fields


async def quickcook_error_handler(request: Request, exc: QuickCookError):
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = _missing_fields(exc)
    message = f"Invalid or missing fields: {', '.join(fields)}." if fields else "Invalid request body."
    error = ValidationFailed(message)
    return _error(error.status_code, error.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, "Route not found.")
    return _error(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "Internal server error.")


def create_app(
    settings: Optional[Settings] = None,
    datastore: Optional[Datastore] = None,
) -> FastAPI:
    """Build the API with an explicit settings object and datastore handle."""
    settings = settings or default_settings
    owns_datastore = datastore is None
    if owns_datastore:
        datastore = Datastore.from_url(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        datastore.create_all()
        logger.info("QuickCook API ready")
        yield
        if owns_datastore:
            datastore.dispose()

    app = FastAPI(title="QuickCook API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.datastore = datastore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(QuickCookError, quickcook_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/")
    def root():
        return {"message": "QuickCook API is running."}

    app.include_router(ready_router, prefix="/api", tags=["ready"])
    app.include_router(auth_router, prefix="/api")
    app.include_router(recipes_router, prefix="/api")
    app.include_router(ingredients_router, prefix="/api")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "quickcook.main:app",
        host=default_settings.host,
        port=default_settings.port,
    )


if __name__ == "__main__":
    run()
