# app/models/spare_part.py
"""
Spare parts stock and the append-only transaction log.
Transactions keep a copy of the part name/number so deleting a part
never rewrites history.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from app.database import Base


class SparePart(Base):
    __tablename__ = "spare_parts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    part_number = Column(String(100), nullable=False, index=True)
    quantity = Column(Integer, default=0, nullable=False)
    price = Column(Float, default=0, nullable=False)
    category = Column(String(100))
    manufacturer = Column(String(200))
    location = Column(String(200))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<SparePart {self.part_number} qty={self.quantity}>"


class PartTransaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    part_id = Column(Integer, nullable=False, index=True)   # no FK: parts may be deleted
    part_name = Column(String(200))
    part_number = Column(String(100))
    quantity = Column(Integer, nullable=False)
    type = Column(String(20), nullable=False)               # sale | purchase
    notes = Column(Text)
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<PartTransaction {self.id} part={self.part_id} {self.type} x{self.quantity}>"
