# app/services/sale_service.py
"""
Vehicle sale completion — stock reconciliation and bill creation.

One sale = one database transaction:
  1. validate the request against the model's aggregate quantity
  2. allocate the bill number and write the Sale row
  3. flip the sold unit(s) available -> sold with a guarded UPDATE
     (WHERE status = 'available'), attaching sale_id
  4. decrement vehicles.quantity with a guarded UPDATE (WHERE quantity >= n)
If any guarded UPDATE loses a race the whole transaction rolls back and
StockConflict is raised, so unit status and the aggregate never diverge.

A bulk sale (no unit targeted) marks up to N available units; when fewer
units are on record the aggregate still drops by N.
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.exceptions import BillCacheError, NotFound, StockConflict, ValidationFailed
from app.models.sale import Sale
from app.models.vehicle import VehicleModel, VehicleUnit, UNIT_AVAILABLE, UNIT_SOLD
from app.schemas.sale import BillRecord, SaleCreate, SaleOut
from app.schemas.vehicle import UnitOut, VehicleOut
from app.services.alert_service import create_alert
from app.services.bill_cache import BillCache
from app.services.change_feed import publish_record
from app.services.invoice_numbering import allocate_bill_number
from app.services.tax_service import compute_amounts
from app.services.vehicle_service import get_vehicle
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _validate(body: SaleCreate, vehicle: VehicleModel, unit: Optional[VehicleUnit]) -> int:
    """Returns the quantity to sell. Raises ValidationFailed before anything is written."""
    if not body.customer_name.strip():
        raise ValidationFailed("Customer name is required")

    quantity = 1 if unit else body.quantity
    if quantity <= 0 or quantity > vehicle.quantity:
        raise ValidationFailed(f"Invalid quantity. Available: {vehicle.quantity}")

    motor_no = body.motor_no.strip() or (unit.motor_no if unit else "")
    chassis_no = body.chassis_no.strip() or (unit.chassis_no if unit else "")
    if not motor_no or not chassis_no:
        raise ValidationFailed("Chassis and Motor numbers are required")
    return quantity


def _load_unit(db: Session, body: SaleCreate) -> Optional[VehicleUnit]:
    if body.unit_id is None:
        return None
    unit = db.query(VehicleUnit).filter(VehicleUnit.id == body.unit_id).first()
    if not unit:
        raise NotFound(f"Vehicle unit {body.unit_id} not found")
    if unit.vehicle_id != body.vehicle_id:
        raise ValidationFailed(f"Unit {unit.id} does not belong to vehicle {body.vehicle_id}")
    if unit.status != UNIT_AVAILABLE:
        raise ValidationFailed(f"Unit {unit.chassis_no} is already sold")
    return unit


def _mark_sold(db: Session, unit_id: int, sale_id: int) -> bool:
    """Compare-and-swap on the unit status. False if someone else sold it first."""
    updated = (
        db.query(VehicleUnit)
        .filter(VehicleUnit.id == unit_id, VehicleUnit.status == UNIT_AVAILABLE)
        .update({VehicleUnit.status: UNIT_SOLD, VehicleUnit.sale_id: sale_id},
                synchronize_session=False)
    )
    return updated == 1


def _decrement_stock(db: Session, vehicle_id: int, quantity: int) -> bool:
    updated = (
        db.query(VehicleModel)
        .filter(VehicleModel.id == vehicle_id, VehicleModel.quantity >= quantity)
        .update({VehicleModel.quantity: VehicleModel.quantity - quantity,
                 VehicleModel.updated_at: datetime.utcnow()},
                synchronize_session=False)
    )
    return updated == 1


def _write_sale(db: Session, body: SaleCreate, vehicle: VehicleModel,
                unit: Optional[VehicleUnit], quantity: int) -> tuple[Sale, list[int]]:
    price = vehicle.price if body.selling_price is None else body.selling_price
    amounts = compute_amounts(price, quantity)
    sale = Sale(
        bill_number=allocate_bill_number(db),
        vehicle_id=vehicle.id,
        unit_id=unit.id if unit else None,
        vehicle_name=vehicle.name,
        vehicle_model=vehicle.model,
        engine_capacity=vehicle.engine_capacity,
        customer_name=body.customer_name.strip(),
        customer_contact=body.customer_contact,
        customer_address=body.customer_address,
        date=(body.date or date.today()).isoformat(),
        quantity=quantity,
        selling_price=price,
        motor_no=body.motor_no.strip() or (unit.motor_no if unit else ""),
        chassis_no=body.chassis_no.strip() or (unit.chassis_no if unit else ""),
        battery_no=body.battery_no.strip() or (unit.battery_no if unit else ""),
        controller_no=body.controller_no.strip() or (unit.controller_no if unit else ""),
        color=body.color or (unit.color if unit else None),
        total_amount=amounts.total_amount,
        cgst=amounts.cgst,
        sgst=amounts.sgst,
        final_amount=amounts.final_amount,
        timestamp=datetime.utcnow(),
    )
    db.add(sale)
    db.flush()

    if unit:
        if not _mark_sold(db, unit.id, sale.id):
            raise StockConflict(f"Unit {unit.chassis_no} was sold by another sale")
        sold_ids = [unit.id]
    else:
        candidates = (
            db.query(VehicleUnit.id)
            .filter(VehicleUnit.vehicle_id == vehicle.id, VehicleUnit.status == UNIT_AVAILABLE)
            .limit(quantity)
            .all()
        )
        sold_ids = []
        for (unit_id,) in candidates:
            if not _mark_sold(db, unit_id, sale.id):
                raise StockConflict(f"Unit {unit_id} was sold by another sale")
            sold_ids.append(unit_id)

    if not _decrement_stock(db, vehicle.id, quantity):
        raise StockConflict(f"Stock of {vehicle.name} changed while the sale was being recorded")
    return sale, sold_ids


async def complete_sale(db: Session, body: SaleCreate, cache: Optional[BillCache] = None) -> Sale:
    vehicle = get_vehicle(db, body.vehicle_id)
    unit = _load_unit(db, body)
    quantity = _validate(body, vehicle, unit)

    try:
        sale, sold_ids = _write_sale(db, body, vehicle, unit, quantity)
        db.commit()
    except (StockConflict, SQLAlchemyError) as e:
        db.rollback()
        logger.error(f"[SALE] Rolled back sale of {vehicle.name} x{quantity}: {e}")
        raise

    db.refresh(vehicle)
    logger.info(f"[SALE] {sale.bill_number} | {vehicle.name} x{quantity} | units={sold_ids} | "
                f"left={vehicle.quantity} | total={sale.final_amount}")

    publish_record("sales", "created", SaleOut, sale)
    publish_record("vehicles", "updated", VehicleOut, vehicle)
    for unit_id in sold_ids:
        sold = db.query(VehicleUnit).filter(VehicleUnit.id == unit_id).first()
        publish_record("vehicleUnits", "updated", UnitOut, sold)

    if vehicle.quantity == 0:
        label = " ".join(filter(None, [vehicle.name, vehicle.model]))
        await create_alert(db, "out_of_stock", "vehicles", vehicle.id, f"{label} is out of stock")

    if cache is not None:
        try:
            cache.append(BillRecord.model_validate(sale).model_copy(update={"created_at": sale.timestamp}))
        except BillCacheError as e:
            # Sale stays committed; the invoice falls back to the sales table
            logger.error(f"[SALE] {sale.bill_number} saved but not cached: {e.message}")
    return sale


def list_sales(db: Session, vehicle_id: Optional[int] = None, limit: int = 100) -> list[Sale]:
    q = db.query(Sale)
    if vehicle_id is not None:
        q = q.filter(Sale.vehicle_id == vehicle_id)
    return q.order_by(Sale.id.desc()).limit(limit).all()


def get_sale(db: Session, bill_number: str) -> Sale:
    sale = db.query(Sale).filter(Sale.bill_number == bill_number).first()
    if not sale:
        raise NotFound(f"Bill {bill_number} not found")
    return sale
