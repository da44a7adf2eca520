# app/routers/spare_parts.py
"""Spare parts — CRUD, stock transactions, low-stock listing."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.spare_part import SparePartCreate, SparePartOut, TransactionCreate, TransactionOut
from app.services import spare_part_service

router = APIRouter()


@router.get("/spare-parts", response_model=list[SparePartOut], summary="List spare parts")
def list_parts(q: Optional[str] = None, low_stock_only: bool = False, db: Session = Depends(get_db)):
    return spare_part_service.list_parts(db, q, low_stock_only)


@router.post("/spare-parts", response_model=SparePartOut, status_code=201, summary="Add a spare part")
def create_part(body: SparePartCreate, db: Session = Depends(get_db)):
    return spare_part_service.create_part(db, body)


@router.get("/spare-parts/transactions", response_model=list[TransactionOut],
            summary="Transaction log, newest first")
def list_transactions(part_id: Optional[int] = None, limit: int = 100, db: Session = Depends(get_db)):
    return spare_part_service.list_transactions(db, part_id, limit)


@router.post("/spare-parts/transactions", response_model=TransactionOut, status_code=201,
             summary="Record a part sale or purchase")
async def record_transaction(body: TransactionCreate, db: Session = Depends(get_db)):
    return await spare_part_service.apply_transaction(db, body)


@router.get("/spare-parts/{part_id}", response_model=SparePartOut)
def get_part(part_id: int, db: Session = Depends(get_db)):
    return spare_part_service.annotate(spare_part_service.get_part(db, part_id))


@router.put("/spare-parts/{part_id}", response_model=SparePartOut, summary="Edit a spare part")
def update_part(part_id: int, body: SparePartCreate, db: Session = Depends(get_db)):
    return spare_part_service.update_part(db, part_id, body)


@router.delete("/spare-parts/{part_id}", summary="Delete a spare part")
def delete_part(part_id: int, confirm: bool = False, db: Session = Depends(get_db)):
    """Transaction history of the part is kept."""
    spare_part_service.delete_part(db, part_id, confirm)
    return {"status": "deleted", "id": part_id}
