import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from quizcraft.core.config import settings
from quizcraft.core.middleware import setup_middleware
from quizcraft.routes.auth.auth_routers import auth_router
from quizcraft.routes.user.user_routers import user_router
from quizcraft.routes.quiz.quiz_routers import quiz_router
from quizcraft.routes.play.play_routers import play_router
from quizcraft.routes.uploads.upload_routers import upload_router
from quizcraft.services.errors import QuizValidationError, StorageError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
    logger.info("Quizcraft API ready, serving uploads from %s", settings.STORAGE_DIR)
    yield
    logger.info("Shutting down")


app = FastAPI(title="Quizcraft", version="1.0.0", lifespan=lifespan)

setup_middleware(app)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(quiz_router)
app.include_router(play_router)
app.include_router(upload_router)

app.mount(
    settings.STORAGE_PUBLIC_URL,
    StaticFiles(directory=settings.STORAGE_DIR, check_dir=False),
    name="uploads",
)


@app.exception_handler(QuizValidationError)
async def validation_error_handler(request: Request, exc: QuizValidationError):
    return JSONResponse(status_code=422, content=exc.to_detail())


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Backend failure on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=503, content=exc.to_detail())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>Quizcraft</title>
        </head>
        <body>
            <h1>Quizcraft API</h1>
            <p>Build personality quizzes and find out who you are.
            See the <a href="/docs">API documentation</a>.</p>
        </body>
    </html>
    """
