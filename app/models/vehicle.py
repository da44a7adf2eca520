# app/models/vehicle.py
"""
Vehicle models and their physical units.
`vehicles.quantity` is the aggregate stock counter shown on the stock list;
`vehicle_units` holds one row per scooter, identified by its serial numbers.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from app.database import Base

UNIT_AVAILABLE = "available"
UNIT_SOLD = "sold"


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    model = Column(String(200))
    category = Column(String(50), default="Scooter", nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    price = Column(Float, default=0, nullable=False)
    specifications = Column(Text)
    engine_capacity = Column(String(100))
    colors = Column(String(200), default="Blue, Navy Blue, Sky Blue")
    date_added = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<VehicleModel {self.id} {self.name} qty={self.quantity}>"


class VehicleUnit(Base):
    __tablename__ = "vehicle_units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, nullable=False, index=True)   # vehicles.id
    motor_no = Column(String(100), nullable=False)
    chassis_no = Column(String(100), nullable=False, index=True)
    battery_no = Column(String(100), nullable=False)
    controller_no = Column(String(100), nullable=False)
    color = Column(String(50), nullable=False)
    status = Column(String(20), default=UNIT_AVAILABLE, nullable=False, index=True)
    sale_id = Column(Integer)                                   # sales.id once sold
    date_added = Column(DateTime)

    def __repr__(self):
        return f"<VehicleUnit {self.id} chassis={self.chassis_no} status={self.status}>"
