from fastapi import APIRouter
from app.api.v1.endpoints import kiosk, schedules, attendance, maintenance

api_router = APIRouter()

# Register routes
api_router.include_router(kiosk.router, prefix="/kiosk", tags=["Kiosk"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["Maintenance"])
