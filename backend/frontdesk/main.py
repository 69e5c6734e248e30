import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from frontdesk.core.config import settings
from frontdesk.core.database import init_db
from frontdesk.core.exceptions import FrontDeskError
from frontdesk.routes.cash import router as cash_router
from frontdesk.routes.handovers import router as handovers_router
from frontdesk.routes.health import router as health_router
from frontdesk.routes.reports import router as reports_router
from frontdesk.routes.shifts import router as shifts_router

logger = logging.getLogger(__name__)


async def frontdesk_error_handler(request: Request, exc: FrontDeskError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.to_dict()})


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Clinic Front Desk API", version="0.1.0")

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(FrontDeskError, frontdesk_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(shifts_router, prefix="/shifts", tags=["shifts"])
    app.include_router(cash_router, prefix="/cash", tags=["cash"])
    app.include_router(handovers_router, prefix="/handovers", tags=["handovers"])
    app.include_router(reports_router, prefix="/reports", tags=["reports"])

    @app.on_event("startup")
    def _create_tables() -> None:
        init_db()

    return app


app = create_app()
