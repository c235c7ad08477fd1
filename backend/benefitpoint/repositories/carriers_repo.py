import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from benefitpoint.repositories.base import repo_call
from benefitpoint.repositories.mappers import map_carrier
from benefitpoint.schemas.carrier import CarrierCreate, CarrierDto, CarrierUpdate
from benefitpoint.services.carrier_service import CarrierService
from benefitpoint.services.filters import CarrierFilters

logger = logging.getLogger(__name__)


class CarriersRepo:

    def __init__(self, db: Session):
        self.service = CarrierService(db)

    def find_all(self, filters: Optional[CarrierFilters] = None) -> Tuple[List[CarrierDto], int]:
        with repo_call("to fetch carriers"):
            rows, total = self.service.fetch_carriers(filters)
        return [map_carrier(row) for row in rows], total

    def find_all_active(self) -> List[CarrierDto]:
        with repo_call("to fetch active carriers"):
            return [map_carrier(row) for row in self.service.fetch_active_carriers()]

    def find_by_id(self, carrier_id: int) -> CarrierDto:
        with repo_call(f"to fetch carrier with ID {carrier_id}"):
            return map_carrier(self.service.fetch_carrier_by_id(carrier_id))

    def create(self, payload: CarrierCreate) -> CarrierDto:
        with repo_call("to create carrier"):
            return map_carrier(self.service.create_carrier(payload.model_dump()))

    def update(self, carrier_id: int, payload: CarrierUpdate) -> CarrierDto:
        with repo_call(f"to update carrier {carrier_id}"):
            row = self.service.update_carrier(carrier_id, payload.model_dump(exclude_unset=True))
        return map_carrier(row)

    def delete(self, carrier_id: int) -> CarrierDto:
        with repo_call(f"to delete carrier {carrier_id}"):
            return map_carrier(self.service.delete_carrier(carrier_id))
