# app/services/spare_part_service.py
"""
Spare parts stock and the sale/purchase transaction log.

Every quantity change goes through apply_transaction(), which writes the new
quantity and an append-only transactions row in the same commit. Deleting a
part leaves its transactions untouched.
"""

from datetime import datetime, date
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.exceptions import ConfirmationRequired, NotFound, ValidationFailed
from app.models.spare_part import SparePart, PartTransaction
from app.schemas.spare_part import SparePartCreate, SparePartOut, TransactionCreate, TransactionOut
from app.services.alert_service import create_alert
from app.services.change_feed import feed, publish_record
from app.utils.logger import get_logger

logger = get_logger(__name__)


def is_low_stock(quantity: int) -> bool:
    return quantity <= settings.LOW_STOCK_THRESHOLD


def stock_level(quantity: int) -> str:
    if is_low_stock(quantity):
        return "low"
    if quantity <= settings.STOCK_WARNING_THRESHOLD:
        return "medium"
    return "ok"


def annotate(part: SparePart) -> SparePart:
    """Attach the derived stock flags used by the parts list."""
    part.is_low_stock = is_low_stock(part.quantity)
    part.stock_level = stock_level(part.quantity)
    return part


def get_part(db: Session, part_id: int) -> SparePart:
    part = db.query(SparePart).filter(SparePart.id == part_id).first()
    if not part:
        raise NotFound("Selected part not found.")
    return part


def _check_required(body: SparePartCreate):
    if not body.name.strip() or not body.part_number.strip():
        raise ValidationFailed("Name and Part Number are required.")


def create_part(db: Session, body: SparePartCreate) -> SparePart:
    _check_required(body)
    now = datetime.utcnow()
    part = SparePart(**body.model_dump(), created_at=now, updated_at=now)
    db.add(part)
    db.commit()
    logger.info(f"[PARTS] Added {part.part_number} '{part.name}' qty={part.quantity}")
    publish_record("spareParts", "created", SparePartOut, annotate(part))
    return part


def update_part(db: Session, part_id: int, body: SparePartCreate) -> SparePart:
    _check_required(body)
    part = get_part(db, part_id)
    for key, value in body.model_dump().items():
        setattr(part, key, value)
    part.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[PARTS] Updated {part.part_number}")
    publish_record("spareParts", "updated", SparePartOut, annotate(part))
    return part


def delete_part(db: Session, part_id: int, confirm: bool = False):
    if not confirm:
        raise ConfirmationRequired("Deleting a spare part needs confirm=true")
    part = get_part(db, part_id)
    db.delete(part)
    db.commit()
    logger.info(f"[PARTS] Deleted part {part_id}")
    feed.publish("spareParts", "deleted", part_id)


def list_parts(db: Session, q: Optional[str] = None, low_stock_only: bool = False) -> list[SparePart]:
    query = db.query(SparePart)
    if q:
        pattern = f"%{q}%"
        query = query.filter(
            SparePart.name.ilike(pattern) | SparePart.part_number.ilike(pattern)
            | SparePart.category.ilike(pattern) | SparePart.manufacturer.ilike(pattern)
        )
    if low_stock_only:
        query = query.filter(SparePart.quantity <= settings.LOW_STOCK_THRESHOLD)
    return [annotate(p) for p in query.order_by(SparePart.name).all()]


async def apply_transaction(db: Session, body: TransactionCreate) -> PartTransaction:
    """Record a sale or purchase of a part and move its stock accordingly."""
    if body.quantity <= 0:
        raise ValidationFailed("Please select a part and enter a valid quantity.")
    part = get_part(db, body.part_id)

    previous = part.quantity
    if body.type == "sale":
        new_quantity = previous - body.quantity
        if new_quantity < 0:
            raise ValidationFailed("Not enough quantity available for this sale.")
    else:
        new_quantity = previous + body.quantity

    now = datetime.utcnow()
    part.quantity = new_quantity
    part.updated_at = now
    txn = PartTransaction(
        part_id=part.id,
        part_name=part.name,
        part_number=part.part_number,
        quantity=body.quantity,
        type=body.type,
        notes=body.notes,
        previous_quantity=previous,
        new_quantity=new_quantity,
        timestamp=now,
    )
    db.add(txn)
    db.commit()
    logger.info(f"[PARTS] {body.type} {part.part_number} x{body.quantity}: {previous} -> {new_quantity}")

    publish_record("transactions", "created", TransactionOut, txn)
    publish_record("spareParts", "updated", SparePartOut, annotate(part))

    if is_low_stock(new_quantity) and not is_low_stock(previous):
        await create_alert(db, "low_stock", "spareParts", part.id,
                           f"{part.name} ({part.part_number}) is low on stock: {new_quantity} left")
    return txn


def list_transactions(db: Session, part_id: Optional[int] = None, limit: int = 100) -> list[PartTransaction]:
    q = db.query(PartTransaction)
    if part_id is not None:
        q = q.filter(PartTransaction.part_id == part_id)
    return q.order_by(PartTransaction.timestamp.desc(), PartTransaction.id.desc()).limit(limit).all()


def count_transactions_since(db: Session, day: date) -> int:
    start = datetime.combine(day, datetime.min.time())
    return db.query(PartTransaction).filter(PartTransaction.timestamp >= start).count()
