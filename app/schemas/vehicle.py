# app/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class UnitCreate(BaseModel):
    motor_no: str = ""
    chassis_no: str = ""
    battery_no: str = ""
    controller_no: str = ""
    color: str = ""


class UnitOut(BaseModel):
    id: int
    vehicle_id: int
    motor_no: str
    chassis_no: str
    battery_no: str
    controller_no: str
    color: str
    status: str
    sale_id: Optional[int]
    date_added: Optional[datetime]

    class Config:
        from_attributes = True


class VehicleCreate(BaseModel):
    name: str
    model: Optional[str] = None
    quantity: int = Field(0, ge=0)
    price: float = Field(0, ge=0)
    specifications: Optional[str] = None
    engine_capacity: Optional[str] = None
    units: list[UnitCreate] = []


class VehicleUpdate(BaseModel):
    name: Optional[str] = None
    model: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    specifications: Optional[str] = None
    engine_capacity: Optional[str] = None


class VehicleOut(BaseModel):
    id: int
    name: str
    model: Optional[str]
    category: str
    quantity: int
    price: float
    specifications: Optional[str]
    engine_capacity: Optional[str]
    colors: Optional[str]
    date_added: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class VehicleSearchOut(BaseModel):
    vehicles: list[VehicleOut]
    unit: Optional[UnitOut] = None     # set when searching by chassis number
