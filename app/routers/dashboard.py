# app/routers/dashboard.py
"""Back-office dashboard — stock, sales and alert totals in one call."""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.models.alert import Alert
from app.models.sale import Sale
from app.models.spare_part import SparePart
from app.models.vehicle import VehicleModel, VehicleUnit, UNIT_AVAILABLE
from app.services.booking_service import list_bookings
from app.services.spare_part_service import count_transactions_since

router = APIRouter()


@router.get("/dashboard", summary="Dashboard totals and quick alerts")
def get_dashboard(db: Session = Depends(get_db)):
    total_parts = db.query(func.count(SparePart.id)).scalar() or 0
    stock_value = db.query(func.sum(SparePart.price * SparePart.quantity)).scalar() or 0
    low_stock = db.query(func.count(SparePart.id)).filter(
        SparePart.quantity <= settings.LOW_STOCK_THRESHOLD
    ).scalar() or 0
    pending_services = len(list_bookings(db, "Pending"))

    quick_alerts = []
    if low_stock > 0:
        quick_alerts.append({"type": "warning",
                             "message": f"{low_stock} spare parts are running low on stock!"})
    if pending_services > 0:
        quick_alerts.append({"type": "info",
                             "message": f"{pending_services} service requests pending"})

    return {
        "date": str(date.today()),
        "total_parts": total_parts,
        "total_value": round(stock_value, 2),
        "low_stock_items": low_stock,
        "total_vehicles": db.query(func.count(VehicleModel.id)).scalar() or 0,
        "vehicles_in_stock": db.query(func.sum(VehicleModel.quantity)).scalar() or 0,
        "available_units": db.query(func.count(VehicleUnit.id)).filter(
            VehicleUnit.status == UNIT_AVAILABLE).scalar() or 0,
        "recent_transactions": count_transactions_since(db, date.today()),
        "total_sales": db.query(func.count(Sale.id)).scalar() or 0,
        "pending_services": pending_services,
        "open_alerts": db.query(func.count(Alert.id)).filter(Alert.is_resolved == 0).scalar() or 0,
        "quick_alerts": quick_alerts,
    }
