# app/schemas/sale.py
from pydantic import BaseModel
from datetime import date as date_type, datetime
from typing import Optional


class SaleCreate(BaseModel):
    vehicle_id: int
    unit_id: Optional[int] = None       # sell one specific unit
    quantity: int = 1
    customer_name: str = ""
    customer_contact: Optional[str] = None
    customer_address: Optional[str] = None
    selling_price: Optional[float] = None   # defaults to the model price
    date: Optional[date_type] = None        # defaults to today
    motor_no: str = ""
    chassis_no: str = ""
    battery_no: str = ""
    controller_no: str = ""
    color: Optional[str] = None


class BillRecord(BaseModel):
    """A saved bill, as kept in the bill cache and printed on the invoice."""
    bill_number: str
    date: str
    vehicle_id: Optional[int] = None
    unit_id: Optional[int] = None
    vehicle_name: Optional[str] = None
    vehicle_model: Optional[str] = None
    engine_capacity: Optional[str] = None
    customer_name: str
    customer_contact: Optional[str] = None
    customer_address: Optional[str] = None
    quantity: int
    selling_price: float
    motor_no: Optional[str] = None
    chassis_no: Optional[str] = None
    battery_no: Optional[str] = None
    controller_no: Optional[str] = None
    color: Optional[str] = None
    total_amount: float
    cgst: float
    sgst: float
    final_amount: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaleOut(BillRecord):
    id: int
    vehicle_id: int
    timestamp: datetime
