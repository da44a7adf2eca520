# app/models/sale.py
"""
Completed vehicle sales (one row per bill) and the invoice number counter.
A sale row is written once and never updated.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from app.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_number = Column(String(30), unique=True, nullable=False, index=True)
    vehicle_id = Column(Integer, nullable=False, index=True)
    unit_id = Column(Integer)
    vehicle_name = Column(String(200))
    vehicle_model = Column(String(200))
    engine_capacity = Column(String(100))

    customer_name = Column(String(200), nullable=False)
    customer_contact = Column(String(50))
    customer_address = Column(Text)
    date = Column(String(10), nullable=False)     # YYYY-MM-DD bill date

    quantity = Column(Integer, nullable=False)
    selling_price = Column(Float, nullable=False)
    motor_no = Column(String(100))
    chassis_no = Column(String(100))
    battery_no = Column(String(100))
    controller_no = Column(String(100))
    color = Column(String(50))

    total_amount = Column(Float, nullable=False)
    cgst = Column(Float, nullable=False)
    sgst = Column(Float, nullable=False)
    final_amount = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Sale {self.bill_number} vehicle={self.vehicle_id} qty={self.quantity}>"


class InvoiceCounter(Base):
    __tablename__ = "invoice_counters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prefix = Column(String(10), unique=True, nullable=False)
    last_value = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<InvoiceCounter {self.prefix}{self.last_value}>"
