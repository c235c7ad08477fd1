from pydantic import Field
from typing import Optional, List
from datetime import datetime
from benefitpoint.schemas.base import CamelModel


class CarrierCreate(CamelModel):
    company_name: str = Field(..., min_length=1)
    is_active: bool = True


class CarrierUpdate(CamelModel):
    company_name: Optional[str] = None
    is_active: Optional[bool] = None


class CarrierDto(CamelModel):
    carrier_id: int
    company_name: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CarrierListResponse(CamelModel):
    carriers: List[CarrierDto]
    total_count: int
    message: str
    success: bool = True
