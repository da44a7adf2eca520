# app/routers/bills.py
"""
Saved bills (local bill cache) — search, edit, delete, and the printable invoice.
"""

from typing import Literal
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from app.database import get_db
from app.exceptions import ConfirmationRequired, NotFound, ValidationFailed
from app.schemas.sale import BillRecord
from app.services import sale_service
from app.services.bill_cache import BillCache, get_bill_cache
from app.services.invoice_numbering import next_bill_number
from app.services.invoice_renderer import render_invoice

router = APIRouter()

SearchCategory = Literal["customer_name", "chassis_no", "motor_no", "battery_no",
                         "controller_no", "date", "bill_number"]


@router.get("/bills", response_model=list[BillRecord], summary="Saved bills, in save order")
def list_bills(cache: BillCache = Depends(get_bill_cache)):
    return cache.load()


@router.get("/bills/search", response_model=list[BillRecord], summary="Search saved bills")
def search_bills(q: str = "", category: SearchCategory = "customer_name",
                 cache: BillCache = Depends(get_bill_cache)):
    return cache.search(q, category)


@router.get("/bills/next-number", summary="Invoice number the next saved bill would get")
def get_next_bill_number(cache: BillCache = Depends(get_bill_cache)):
    return {"bill_number": next_bill_number([b.bill_number for b in cache.load()])}


@router.put("/bills/{bill_number}", response_model=BillRecord, summary="Edit a saved bill")
def edit_bill(bill_number: str, body: BillRecord, cache: BillCache = Depends(get_bill_cache)):
    if body.bill_number != bill_number:
        raise ValidationFailed("Bill number cannot be changed")
    if not body.customer_name.strip():
        raise ValidationFailed("Customer name is required")
    return cache.replace(bill_number, body)


@router.delete("/bills/{bill_number}", summary="Delete a saved bill")
def delete_bill(bill_number: str, confirm: bool = False, cache: BillCache = Depends(get_bill_cache)):
    """Removes the bill from the saved-bills list only; the sale record stays."""
    if not confirm:
        raise ConfirmationRequired("Deleting a bill needs confirm=true")
    remaining = cache.delete(bill_number)
    return {"status": "deleted", "bill_number": bill_number, "remaining": len(remaining)}


@router.get("/bills/{bill_number}/invoice", response_class=PlainTextResponse,
            summary="Printable tax invoice")
def get_invoice(bill_number: str, db: Session = Depends(get_db),
                cache: BillCache = Depends(get_bill_cache)):
    """Renders the saved (possibly edited) bill; falls back to the sale record."""
    try:
        bill = cache.get(bill_number)
    except NotFound:
        bill = BillRecord.model_validate(sale_service.get_sale(db, bill_number))
    return render_invoice(bill)
