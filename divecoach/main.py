from fastapi import FastAPI
from divecoach.config import SERVICE_NAME
from divecoach.routes.diagnose_route import router as diagnose_router
from divecoach.routes.health_route import router as health_router

app = FastAPI(
    title=SERVICE_NAME,
    version="1.0.0"
)

# Register endpoints
app.include_router(health_router, tags=["health"])
app.include_router(diagnose_router, prefix="/enclose", tags=["enclose"])
