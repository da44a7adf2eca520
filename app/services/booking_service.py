# app/services/booking_service.py
"""
Service bookings for customer scooters (bikeServices).
Status is a plain four-value field; any status can be set at any time.
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import ConfirmationRequired, NotFound, ValidationFailed
from app.models.service_record import ServiceRecord
from app.schemas.service_record import ServiceRecordCreate, ServiceRecordOut
from app.services.change_feed import feed, publish_record
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _check_required(body: ServiceRecordCreate):
    missing = [label for label, value in (("Customer name", body.customer_name),
                                          ("Phone", body.phone),
                                          ("Bike model", body.bike_model))
               if not value.strip()]
    if missing:
        raise ValidationFailed(f"{', '.join(missing)} required")


def _fields(body: ServiceRecordCreate) -> dict:
    data = body.model_dump()
    data["date"] = (body.date or date.today()).isoformat()
    return data


def get_booking(db: Session, booking_id: int) -> ServiceRecord:
    record = db.query(ServiceRecord).filter(ServiceRecord.id == booking_id).first()
    if not record:
        raise NotFound(f"Service record {booking_id} not found")
    return record


def create_booking(db: Session, body: ServiceRecordCreate) -> ServiceRecord:
    _check_required(body)
    record = ServiceRecord(**_fields(body), timestamp=datetime.utcnow())
    db.add(record)
    db.commit()
    logger.info(f"[SERVICE] Scheduled {record.service_type} for {record.customer_name} on {record.date}")
    publish_record("bikeServices", "created", ServiceRecordOut, record)
    return record


def update_booking(db: Session, booking_id: int, body: ServiceRecordCreate) -> ServiceRecord:
    _check_required(body)
    record = get_booking(db, booking_id)
    for key, value in _fields(body).items():
        setattr(record, key, value)
    db.commit()
    logger.info(f"[SERVICE] Updated booking {booking_id}")
    publish_record("bikeServices", "updated", ServiceRecordOut, record)
    return record


def set_status(db: Session, booking_id: int, status: str) -> ServiceRecord:
    record = get_booking(db, booking_id)
    previous = record.status
    record.status = status
    db.commit()
    logger.info(f"[SERVICE] Booking {booking_id}: {previous} -> {status}")
    publish_record("bikeServices", "updated", ServiceRecordOut, record)
    return record


def delete_booking(db: Session, booking_id: int, confirm: bool = False):
    if not confirm:
        raise ConfirmationRequired("Deleting a service record needs confirm=true")
    record = get_booking(db, booking_id)
    db.delete(record)
    db.commit()
    logger.info(f"[SERVICE] Deleted booking {booking_id}")
    feed.publish("bikeServices", "deleted", booking_id)


def list_bookings(db: Session, status: Optional[str] = None) -> list[ServiceRecord]:
    """Newest service date first."""
    q = db.query(ServiceRecord)
    if status and status != "all":
        q = q.filter(ServiceRecord.status == status)
    return q.order_by(ServiceRecord.date.desc(), ServiceRecord.id.desc()).all()
