import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from benefitpoint.core.database import get_db
from benefitpoint.repositories.carriers_repo import CarriersRepo
from benefitpoint.schemas.carrier import CarrierCreate, CarrierDto, CarrierListResponse, CarrierUpdate
from benefitpoint.services.filters import CarrierFilters

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/carriers", tags=["carriers"])


@router.get("", response_model=CarrierListResponse)
def list_carriers(
    search: Optional[str] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    offset: Optional[int] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    filters = CarrierFilters(search_term=search, is_active=is_active, offset=offset, limit=limit)
    carriers, total = CarriersRepo(db).find_all(filters)
    return CarrierListResponse(carriers=carriers, total_count=total, message=f"Found {total} carriers")


@router.get("/active", response_model=List[CarrierDto])
def list_active_carriers(db: Session = Depends(get_db)):
    return CarriersRepo(db).find_all_active()


@router.get("/{carrier_id}", response_model=CarrierDto)
def get_carrier(carrier_id: int, db: Session = Depends(get_db)):
    return CarriersRepo(db).find_by_id(carrier_id)


@router.post("", response_model=CarrierDto, status_code=201)
def create_carrier(payload: CarrierCreate, db: Session = Depends(get_db)):
    return CarriersRepo(db).create(payload)


@router.patch("/{carrier_id}", response_model=CarrierDto)
def update_carrier(carrier_id: int, payload: CarrierUpdate, db: Session = Depends(get_db)):
    return CarriersRepo(db).update(carrier_id, payload)


@router.delete("/{carrier_id}", response_model=CarrierDto)
def delete_carrier(carrier_id: int, db: Session = Depends(get_db)):
    """Deactivate a carrier. The record is kept."""
    carrier = CarriersRepo(db).delete(carrier_id)
    logger.info("Carrier %s deactivated via API", carrier_id)
    return carrier
