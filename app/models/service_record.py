# app/models/service_record.py
"""
Service bookings (bikeServices). Status moves freely between
Pending, In Progress, Completed and Cancelled on user action.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class ServiceRecord(Base):
    __tablename__ = "bike_services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(200))
    bike_model = Column(String(200), nullable=False)
    battery_health = Column(Integer)                  # percent, optional
    service_type = Column(String(50), nullable=False, default="Regular Maintenance")
    description = Column(Text)
    date = Column(String(10), nullable=False, index=True)   # YYYY-MM-DD
    status = Column(String(20), nullable=False, default="Pending", index=True)
    timestamp = Column(DateTime)

    def __repr__(self):
        return f"<ServiceRecord {self.id} {self.customer_name} status={self.status}>"
