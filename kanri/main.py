import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from kanri.api.auth import router as auth_router
from kanri.api.deps import enforce_ban
from kanri.api.settings import router as settings_router
from kanri.api.users import router as users_router
from kanri.config import settings
from kanri.database import engine, init_db, seed_admin
from kanri.errors import Redirect
from kanri.pages import router as pages_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from sqlmodel import Session

    init_db()
    with Session(engine) as session:
        seed_admin(session)
    yield


app = FastAPI(
    title="Kanri",
    version="0.1.0",
    lifespan=lifespan,
    # Runs for every matched route; unmatched method/path pairs 404 or 405 before it
    dependencies=[Depends(enforce_ban)],
)


@app.exception_handler(Redirect)
async def redirect_handler(request: Request, exc: Redirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=302)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as plain 400s."""
    return JSONResponse(status_code=400, content={"detail": "invalid request body"})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Unhandled storage error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "db error"})


app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(settings_router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok"}


# Catch-all static route, must stay last
app.include_router(pages_router)
