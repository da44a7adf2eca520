# app/routers/sales.py
"""Vehicle sales — completes a sale and returns the saved bill."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.sale import SaleCreate, SaleOut
from app.services import sale_service
from app.services.bill_cache import BillCache, get_bill_cache

router = APIRouter()


@router.post("/sales", response_model=SaleOut, status_code=201, summary="Complete a vehicle sale")
async def complete_sale(body: SaleCreate, db: Session = Depends(get_db),
                        cache: BillCache = Depends(get_bill_cache)):
    """
    Sells one specific unit (unit_id) or N units of a model (quantity).
    400 on validation errors, 409 if the stock changed under the sale.
    """
    return await sale_service.complete_sale(db, body, cache)


@router.get("/sales", response_model=list[SaleOut], summary="List completed sales")
def list_sales(vehicle_id: Optional[int] = None, limit: int = 100, db: Session = Depends(get_db)):
    return sale_service.list_sales(db, vehicle_id, limit)


@router.get("/sales/{bill_number}", response_model=SaleOut)
def get_sale(bill_number: str, db: Session = Depends(get_db)):
    return sale_service.get_sale(db, bill_number)
