# app/services/alert_service.py
"""
Shared alert creation service.
Used by spare_part_service (low stock) and sale_service (out of stock).
Extend here to add push notifications, SMS, email, etc.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from app.models.alert import Alert
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def create_alert(db: Session, alert_type, source, record_id, description):
    """Create and persist an alert record. Skips it if the same one is still open."""
    open_alert = db.query(Alert).filter(
        Alert.alert_type == alert_type, Alert.source == source,
        Alert.record_id == record_id, Alert.is_resolved == 0,
    ).first()
    if open_alert:
        return open_alert

    alert = Alert(alert_type=alert_type, source=source, record_id=record_id,
                  description=description, is_resolved=0, triggered_at=datetime.utcnow())
    db.add(alert)
    db.commit()
    logger.warning(f"[ALERT][{alert_type.upper()}] {description}")
    return alert


def resolve_alert(db: Session, alert: Alert):
    alert.is_resolved = 1
    alert.resolved_at = datetime.utcnow()
    db.commit()
