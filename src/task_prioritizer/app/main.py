import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_prioritizer.app.routes import tasks
from task_prioritizer.app.middleware.access_log import AccessLogMiddleware
from task_prioritizer.config import Settings
from task_prioritizer.domain.errors import TaskError
from task_prioritizer.infra.db.sqlite import create_schema, make_sqlite_url, make_engine, make_sessionmaker
from task_prioritizer.infra.db.task_repo_sqlite import SQLiteTaskRepo
from task_prioritizer.observability.logging import setup_logging
from task_prioritizer.services.task_service import TaskService

logger = logging.getLogger("tasks.system")


def create_app(settings: Optional[Settings] = None, repo=None) -> FastAPI:
    """
    Build the API. `repo` replaces the SQLite store when given (tests pass
    an InMemoryTaskRepo).
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_dir)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    app = FastAPI(
        title="Task Prioritization System",
        description="Create, filter, schedule and reorder prioritized tasks.",
        docs_url="/api-docs",
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- SQLite wiring ---
    if repo is None:
        engine = make_engine(make_sqlite_url(settings.db_path))
        repo = SQLiteTaskRepo(make_sessionmaker(engine))

        @app.on_event("startup")
        async def _startup():
            await create_schema(engine)
            logger.info(
                "db.ready",
                extra={"category": "system", "event": "db.ready", "db_path": settings.db_path},
            )

        @app.on_event("shutdown")
        async def _shutdown():
            await engine.dispose()

    app.state.task_service = TaskService(repo)

    @app.exception_handler(TaskError)
    async def _task_error(request: Request, exc: TaskError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    app.include_router(tasks.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
