import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .config import settings
from .core.database import Base, engine
from .api.errors import register_error_handlers
from .api.routes_words import router as words_router
from .api.routes_lookup import router as lookup_router
from .frontend.routes_ui import STATIC_DIR, router as ui_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    @app.on_event("startup")
    async def startup_event():
        # Create tables
        Base.metadata.create_all(bind=engine)
        logger.info("%s started (%s)", settings.app_name, settings.environment)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # added last so it wraps CORS preflight responses too
    @app.middleware("http")
    async def no_store(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-store"
        return response

    register_error_handlers(app)

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse("/ui/")

    app.include_router(words_router)
    app.include_router(lookup_router)
    app.include_router(ui_router)
    app.mount("/ui/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("wordbook.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
