from fastapi import APIRouter

from app.core.scoring import get_scoring_config

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    get_scoring_config()
    return {"status": "healthy"}
