# app/routers/bike_services.py
"""Service bookings — schedule, edit, change status, delete."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.service_record import ServiceRecordCreate, ServiceRecordOut, ServiceStatusUpdate
from app.services import booking_service

router = APIRouter()


@router.get("/services", response_model=list[ServiceRecordOut], summary="List bookings, newest first")
def list_bookings(status: Optional[str] = None, db: Session = Depends(get_db)):
    """Filter by status (Pending, In Progress, Completed, Cancelled) or 'all'."""
    return booking_service.list_bookings(db, status)


@router.post("/services", response_model=ServiceRecordOut, status_code=201, summary="Schedule a service")
def create_booking(body: ServiceRecordCreate, db: Session = Depends(get_db)):
    return booking_service.create_booking(db, body)


@router.put("/services/{booking_id}", response_model=ServiceRecordOut, summary="Edit a booking")
def update_booking(booking_id: int, body: ServiceRecordCreate, db: Session = Depends(get_db)):
    return booking_service.update_booking(db, booking_id, body)


@router.put("/services/{booking_id}/status", response_model=ServiceRecordOut, summary="Change booking status")
def set_status(booking_id: int, body: ServiceStatusUpdate, db: Session = Depends(get_db)):
    return booking_service.set_status(db, booking_id, body.status)


@router.delete("/services/{booking_id}", summary="Delete a booking")
def delete_booking(booking_id: int, confirm: bool = False, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id, confirm)
    return {"status": "deleted", "id": booking_id}
