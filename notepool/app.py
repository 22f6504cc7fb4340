"""
Anonymous Notes API Service - FastAPI Application.

Serves the note pool API, the home and admin HTML shells and the
static assets next to them.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from notepool.config import Settings, get_settings
from notepool.database import create_session_factory, get_engine, init_db
from notepool.exceptions import StoreError, register_exception_handlers
from notepool.note_service import NoteService, get_note_service
from notepool.routes import admin_router, notes_router


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {app.state.settings.app_name}...")
    init_db(app.state.engine)
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {app.state.settings.app_name}...")
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The engine, session factory and settings are created here and kept
    on `app.state`; routes reach them through dependencies.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="""
## Anonymous Notes API

Backend for an anonymous note-sharing site.

### Public

- Submit a note (POST /submit), read a random one (GET /random),
  count visible notes (GET /count)
- Like (POST /like) or report (POST /report) a note; three reports
  hide it
- Leave feedback (POST /feedback)

### Admin

Routes under /admin require the admin password and let moderators
list everything, hide/unhide, retag, reset reports and delete notes.
        """,
        version=settings.app_version,
        lifespan=lifespan,
    )

    engine = get_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(notes_router)
    app.include_router(admin_router)

    public_dir = settings.public_dir

    @app.get("/", include_in_schema=False)
    def home_page():
        """Home page shell."""
        return FileResponse(public_dir / "home.html")

    @app.get("/admin", include_in_schema=False)
    def admin_page():
        """Admin page shell. The data behind it needs the password."""
        return FileResponse(public_dir / "admin.html")

    @app.get("/health")
    def health(service: NoteService = Depends(get_note_service)):
        """Store round-trip check."""
        try:
            service.ping()
        except StoreError:
            logger.exception("Health check failed")
            return JSONResponse(status_code=500, content={"ok": False})
        return {"ok": True}

    # Everything else falls through to the static directory
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="static")
    else:
        logger.warning(f"Public directory {public_dir} not found; static files disabled")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "notepool.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
