# app/services/vehicle_service.py
"""
Vehicle stock: models, their physical units, and stock search.
Used by the vehicles router and by sale_service.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import ConfirmationRequired, NotFound, ValidationFailed
from app.models.vehicle import VehicleModel, VehicleUnit, UNIT_AVAILABLE
from app.schemas.vehicle import UnitCreate, UnitOut, VehicleCreate, VehicleOut, VehicleUpdate
from app.services.change_feed import feed, publish_record
from app.utils.logger import get_logger

logger = get_logger(__name__)

SEARCH_FIELDS = ("name", "model", "engine_capacity", "specifications", "all", "chassis_no")
_ALL_FIELDS = ("name", "model", "category", "quantity", "price",
               "specifications", "engine_capacity", "colors")
UNIT_SERIAL_FIELDS = ("motor_no", "chassis_no", "battery_no", "controller_no", "color")


def get_vehicle(db: Session, vehicle_id: int) -> VehicleModel:
    vehicle = db.query(VehicleModel).filter(VehicleModel.id == vehicle_id).first()
    if not vehicle:
        raise NotFound(f"Vehicle {vehicle_id} not found")
    return vehicle


def _validate_units(units: list[UnitCreate]):
    for unit in units:
        if not all(getattr(unit, f).strip() for f in UNIT_SERIAL_FIELDS):
            raise ValidationFailed("Please fill all fields for each vehicle unit.")


def _new_unit(vehicle_id: int, unit: UnitCreate) -> VehicleUnit:
    return VehicleUnit(
        vehicle_id=vehicle_id,
        motor_no=unit.motor_no.strip(),
        chassis_no=unit.chassis_no.strip(),
        battery_no=unit.battery_no.strip(),
        controller_no=unit.controller_no.strip(),
        color=unit.color.strip(),
        status=UNIT_AVAILABLE,
        date_added=datetime.utcnow(),
    )


def create_vehicle(db: Session, body: VehicleCreate) -> VehicleModel:
    """Add a model, and optionally the batch of units that arrived with it."""
    if not body.name.strip():
        raise ValidationFailed("Vehicle name is required.")
    if len(body.units) > body.quantity:
        raise ValidationFailed(f"Got {len(body.units)} units for a quantity of {body.quantity}.")
    _validate_units(body.units)

    now = datetime.utcnow()
    vehicle = VehicleModel(
        name=body.name.strip(),
        model=body.model,
        category="Scooter",
        quantity=body.quantity,
        price=body.price,
        specifications=body.specifications,
        engine_capacity=body.engine_capacity,
        colors="Blue, Navy Blue, Sky Blue",
        date_added=now,
        updated_at=now,
    )
    db.add(vehicle)
    db.flush()
    units = [_new_unit(vehicle.id, u) for u in body.units]
    db.add_all(units)
    db.commit()
    logger.info(f"[STOCK] Added {vehicle.name} {vehicle.model or ''} qty={vehicle.quantity} units={len(units)}")

    publish_record("vehicles", "created", VehicleOut, vehicle)
    for unit in units:
        publish_record("vehicleUnits", "created", UnitOut, unit)
    return vehicle


def add_units(db: Session, vehicle_id: int, units: list[UnitCreate]) -> list[VehicleUnit]:
    """Record the serial numbers of a batch of units for an existing model."""
    vehicle = get_vehicle(db, vehicle_id)
    if not units:
        raise ValidationFailed("No vehicle units given.")
    _validate_units(units)

    rows = [_new_unit(vehicle.id, u) for u in units]
    db.add_all(rows)
    db.commit()
    logger.info(f"[STOCK] {len(rows)} units saved for {vehicle.name}")
    for row in rows:
        publish_record("vehicleUnits", "created", UnitOut, row)
    return rows


def update_vehicle(db: Session, vehicle_id: int, body: VehicleUpdate) -> VehicleModel:
    vehicle = get_vehicle(db, vehicle_id)
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationFailed("Vehicle name is required.")
    for key, value in changes.items():
        setattr(vehicle, key, value)
    vehicle.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[STOCK] Updated vehicle {vehicle_id}: {sorted(changes)}")
    publish_record("vehicles", "updated", VehicleOut, vehicle)
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int, confirm: bool = False) -> int:
    """Remove a model and all of its units. Returns the number of units removed."""
    if not confirm:
        raise ConfirmationRequired("Deleting a vehicle needs confirm=true")
    vehicle = get_vehicle(db, vehicle_id)
    units = db.query(VehicleUnit).filter(VehicleUnit.vehicle_id == vehicle_id).all()
    unit_ids = [u.id for u in units]
    for unit in units:
        db.delete(unit)
    db.delete(vehicle)
    db.commit()
    logger.info(f"[STOCK] Deleted vehicle {vehicle_id} and {len(unit_ids)} units")

    feed.publish("vehicles", "deleted", vehicle_id)
    for unit_id in unit_ids:
        feed.publish("vehicleUnits", "deleted", unit_id)
    return len(unit_ids)


def list_units(db: Session, vehicle_id: int, status: Optional[str] = None) -> list[VehicleUnit]:
    get_vehicle(db, vehicle_id)
    q = db.query(VehicleUnit).filter(VehicleUnit.vehicle_id == vehicle_id)
    if status:
        q = q.filter(VehicleUnit.status == status)
    return q.order_by(VehicleUnit.id).all()


def available_unit_count(db: Session, vehicle_id: int) -> int:
    return db.query(VehicleUnit).filter(
        VehicleUnit.vehicle_id == vehicle_id, VehicleUnit.status == UNIT_AVAILABLE
    ).count()


def search_vehicles(db: Session, query: str = "", field: str = "name"):
    """
    Stock search. Returns (vehicles, unit): unit is the matching unit when
    searching by chassis number, otherwise None.
    """
    if field not in SEARCH_FIELDS:
        raise ValidationFailed(f"Cannot search by '{field}'")
    vehicles = db.query(VehicleModel).order_by(VehicleModel.id).all()
    needle = (query or "").strip().lower()
    if not needle:
        return vehicles, None

    if field == "chassis_no":
        unit = (
            db.query(VehicleUnit)
            .filter(VehicleUnit.chassis_no.ilike(f"%{needle}%"))
            .order_by(VehicleUnit.id)
            .first()
        )
        if not unit:
            return [], None
        owner = [v for v in vehicles if v.id == unit.vehicle_id]
        return owner, unit if owner else None

    fields = _ALL_FIELDS if field == "all" else (field,)
    matches = [
        v for v in vehicles
        if any(needle in str(getattr(v, f)).lower() for f in fields if getattr(v, f) is not None)
    ]
    return matches, None
