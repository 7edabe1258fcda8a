import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from core.config import settings
from core.database import engine
from core.errors import REQUEST_ID_HEADER, get_request_id, register_exception_handlers
from models.base import Base, load_models
from utils.local_storage import PUBLIC_PREFIX, uploads_dir

from routers.auth import router as auth_router
from routers.users import router as users_router
from routers.follows import router as follows_router, legacy_router as follow_legacy_router
from routers.posts import router as posts_router
from routers.likes import router as likes_router
from routers.saves import router as saves_router
from routers.comments import router as comments_router
from routers.messages import router as messages_router
from routers.notifications import router as notifications_router
from routers.push import router as push_router
from routers.contact_requests import router as contact_requests_router
from routers.uploads import router as uploads_router
from routers.files import router as files_router
from routers.health import router as health_router

load_models()

SERVICE_WORKER = Path(__file__).resolve().parent / "public" / "service-worker.js"

app = FastAPI(
    title="BoxFit Backend",
    version="1.0.0",
    description="REST backend of the BoxFit social network",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")

register_exception_handlers(app)


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    request_id = get_request_id(request)
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    response.headers[REQUEST_ID_HEADER] = request_id
    if request.url.path.startswith(PUBLIC_PREFIX + "/"):
        response.headers["X-Content-Type-Options"] = "nosniff"
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} completed in {process_time:.2f} ms"
    )
    return response


app.mount(PUBLIC_PREFIX, StaticFiles(directory=str(uploads_dir())), name="uploads")

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(follows_router)
app.include_router(follow_legacy_router)
app.include_router(posts_router)
app.include_router(likes_router)
app.include_router(saves_router)
app.include_router(comments_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(push_router)
app.include_router(contact_requests_router)
app.include_router(uploads_router)
app.include_router(files_router)
app.include_router(health_router)


@app.get("/service-worker.js", include_in_schema=False)
@app.get("/api/push/service-worker.js", include_in_schema=False)
async def service_worker():
    return FileResponse(
        SERVICE_WORKER,
        media_type="application/javascript",
        headers={"Service-Worker-Allowed": "/", "Cache-Control": "no-cache"},
    )


@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.get("/")
async def root():
    return {"message": "BoxFit Backend"}


@app.on_event("shutdown")
async def shutdown():
    await engine.dispose()
