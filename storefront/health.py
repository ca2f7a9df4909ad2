from fastapi import APIRouter
from fastapi.responses import JSONResponse

from storefront.readiness import readiness_manager

router = APIRouter()

@router.get("/health")
async def health_check():
    return {"status": "healthy"}

@router.get("/ready")
async def readiness_check():
    status = readiness_manager.get_status()
    if not status["ready"]:
        return JSONResponse(status_code=503, content=status)
    return status
