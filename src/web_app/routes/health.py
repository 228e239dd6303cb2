from fastapi import APIRouter

from models import HealthStatus

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health():
    return HealthStatus()
