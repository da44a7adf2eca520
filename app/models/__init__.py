# Anita Motors back-office — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.vehicle import VehicleModel, VehicleUnit        # noqa
from app.models.spare_part import SparePart, PartTransaction    # noqa
from app.models.sale import Sale, InvoiceCounter                # noqa
from app.models.service_record import ServiceRecord             # noqa
from app.models.alert import Alert                              # noqa
