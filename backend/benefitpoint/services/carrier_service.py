"""Carrier data access."""
import logging
from typing import List, Optional, Tuple

from benefitpoint.core.exceptions import NotFoundError, ValidationError
from benefitpoint.models.carrier import Carrier
from benefitpoint.services.base import StoreService
from benefitpoint.services.filters import CarrierFilters, apply_carrier_filters, paginate

logger = logging.getLogger(__name__)


class CarrierService(StoreService):

    def fetch_carriers(self, filters: Optional[CarrierFilters] = None) -> Tuple[List[Carrier], int]:
        with self.store_call("fetching carriers"):
            query = apply_carrier_filters(self.db.query(Carrier), filters)
            total = query.count()
            query = query.order_by(Carrier.company_name, Carrier.carrier_id)
            if filters is not None:
                query = paginate(query, filters.offset, filters.limit)
            carriers = query.all()
        return carriers, total

    def fetch_active_carriers(self) -> List[Carrier]:
        carriers, _ = self.fetch_carriers(CarrierFilters(is_active=True))
        return carriers

    def fetch_carrier_by_id(self, carrier_id: int) -> Carrier:
        with self.store_call(f"fetching carrier {carrier_id}"):
            carrier = self.db.query(Carrier).filter(Carrier.carrier_id == carrier_id).first()
        if not carrier:
            logger.error("Carrier %s not found", carrier_id)
            raise NotFoundError("Carrier not found")
        return carrier

    def create_carrier(self, carrier_data: dict) -> Carrier:
        if not (carrier_data.get("company_name") or "").strip():
            raise ValidationError("Company name is required")
        carrier = Carrier(**carrier_data)
        if carrier.is_active is None:
            carrier.is_active = True
        carrier.created_at = self.now()
        return self.save(carrier, "creating carrier")

    def update_carrier(self, carrier_id: int, updates: dict) -> Carrier:
        carrier = self.fetch_carrier_by_id(carrier_id)
        self.apply_updates(
            carrier,
            updates,
            immutable=("carrier_id", "created_at"),
            required={"company_name": "Company name", "is_active": "Active flag"},
        )
        carrier.updated_at = self.now()
        return self.save(carrier, f"updating carrier {carrier_id}")

    def delete_carrier(self, carrier_id: int) -> Carrier:
        """Soft delete: the carrier is deactivated, the record stays."""
        carrier = self.update_carrier(carrier_id, {"is_active": False})
        logger.info("Carrier %s deactivated", carrier_id)
        return carrier
