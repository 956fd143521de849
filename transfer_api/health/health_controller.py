# transfer_api/health/health_controller.py
import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from transfer_api.health.health_schema import HealthOut

router = APIRouter(tags=["health"])


@router.get("/")
def root(request: Request):
    settings = request.app.state.settings
    return {"message": settings.service_name, "version": settings.version}


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    settings = request.app.state.settings
    return HealthOut(
        current_time=datetime.datetime.now(datetime.timezone.utc),
        service=settings.service_name,
        version=settings.version,
    )


@router.api_route("/health", methods=["POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"], include_in_schema=False)
def health_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
