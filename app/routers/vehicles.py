# app/routers/vehicles.py
"""Vehicle stock — models, their units, and stock search."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import UnitCreate, UnitOut, VehicleCreate, VehicleOut, VehicleSearchOut, VehicleUpdate
from app.services import vehicle_service

router = APIRouter()


@router.get("/vehicles", response_model=VehicleSearchOut, summary="List / search vehicle stock")
def list_vehicles(q: str = "", field: str = "name", db: Session = Depends(get_db)):
    """
    Search by name, model, engine_capacity, specifications, all, or chassis_no.
    A chassis search also returns the matching unit.
    """
    vehicles, unit = vehicle_service.search_vehicles(db, q, field)
    return {"vehicles": vehicles, "unit": unit}


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Add a vehicle model")
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    """Add a model. Units may be sent with it or later via /vehicles/{id}/units."""
    return vehicle_service.create_vehicle(db, body)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Edit a vehicle model")
def update_vehicle(vehicle_id: int, body: VehicleUpdate, db: Session = Depends(get_db)):
    return vehicle_service.update_vehicle(db, vehicle_id, body)


@router.delete("/vehicles/{vehicle_id}", summary="Delete a vehicle model and its units")
def delete_vehicle(vehicle_id: int, confirm: bool = False, db: Session = Depends(get_db)):
    removed_units = vehicle_service.delete_vehicle(db, vehicle_id, confirm)
    return {"status": "deleted", "id": vehicle_id, "units_removed": removed_units}


@router.get("/vehicles/{vehicle_id}/units", response_model=list[UnitOut], summary="Units of a model")
def list_units(vehicle_id: int, status: Optional[str] = None, db: Session = Depends(get_db)):
    return vehicle_service.list_units(db, vehicle_id, status)


@router.post("/vehicles/{vehicle_id}/units", response_model=list[UnitOut], status_code=201,
             summary="Save serial numbers for a batch of units")
def add_units(vehicle_id: int, units: list[UnitCreate], db: Session = Depends(get_db)):
    return vehicle_service.add_units(db, vehicle_id, units)
