# routers/health.py
from fastapi import APIRouter

router = APIRouter()


@router.get("/api/healthz", summary="Health check")
async def healthcheck():
    return {"ok": True}
