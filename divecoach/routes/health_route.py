from fastapi import APIRouter

from divecoach.config import SERVICE_NAME

router = APIRouter()

@router.get("/")
def health():
    return {"status": "ok", "service": SERVICE_NAME}
