# app/schemas/service_record.py
from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import Literal, Optional

ServiceStatus = Literal["Pending", "In Progress", "Completed", "Cancelled"]
ServiceType = Literal[
    "Regular Maintenance", "Battery Service", "Motor Repair", "Controller Issues",
    "Brake System", "Software Update", "Full Inspection", "Other",
]


class ServiceRecordCreate(BaseModel):
    customer_name: str
    phone: str
    email: Optional[str] = None
    bike_model: str
    battery_health: Optional[int] = Field(None, ge=0, le=100)
    service_type: ServiceType = "Regular Maintenance"
    description: Optional[str] = None
    date: Optional[date_type] = None
    status: ServiceStatus = "Pending"


class ServiceStatusUpdate(BaseModel):
    status: ServiceStatus


class ServiceRecordOut(BaseModel):
    id: int
    customer_name: str
    phone: str
    email: Optional[str]
    bike_model: str
    battery_health: Optional[int]
    service_type: str
    description: Optional[str]
    date: str
    status: str
    timestamp: Optional[datetime]

    class Config:
        from_attributes = True
