# transfer_api/health/health_schema.py
from datetime import datetime

from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str = "HEALTHY"
    current_time: datetime
    service: str
    version: str
