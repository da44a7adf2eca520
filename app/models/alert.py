# app/models/alert.py
"""
Alerts table — stock alerts raised by the parts and sales services.
low_stock: a spare part dropped to the low-stock threshold.
out_of_stock: a vehicle model's aggregate quantity reached zero.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alert_type = Column(String(50), nullable=False, index=True)
    source = Column(String(50), nullable=False)        # collection name
    record_id = Column(Integer)
    description = Column(Text)
    is_resolved = Column(Integer, default=0, nullable=False)
    triggered_at = Column(DateTime, nullable=False, index=True)
    resolved_at = Column(DateTime)

    def __repr__(self):
        return f"<Alert {self.id} type={self.alert_type} resolved={self.is_resolved}>"
