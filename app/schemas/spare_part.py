# app/schemas/spare_part.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class SparePartCreate(BaseModel):
    name: str
    part_number: str
    quantity: int = Field(0, ge=0)
    price: float = Field(0, ge=0)
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    location: Optional[str] = None


class SparePartOut(BaseModel):
    id: int
    name: str
    part_number: str
    quantity: int
    price: float
    category: Optional[str]
    manufacturer: Optional[str]
    location: Optional[str]
    is_low_stock: Optional[bool] = None
    stock_level: Optional[str] = None     # low | medium | ok
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class TransactionCreate(BaseModel):
    part_id: int
    quantity: int
    type: Literal["sale", "purchase"] = "sale"
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    id: int
    part_id: int
    part_name: Optional[str]
    part_number: Optional[str]
    quantity: int
    type: str
    notes: Optional[str]
    previous_quantity: int
    new_quantity: int
    timestamp: datetime

    class Config:
        from_attributes = True
