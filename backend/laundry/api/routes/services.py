"""
Services API routes.
"""
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator

from laundry.api.dependencies import get_catalog_service
from laundry.services.catalog_service import CatalogService
from laundry.services.legacy_pricing import is_valid_price_label


# Pydantic schemas
class ServiceResponse(BaseModel):
    """Service as stored in the catalog."""
    id: UUID
    name: str
    price: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ServiceRequest(BaseModel):
    """Create/update payload for a service."""
    name: str = Field(min_length=1, max_length=255, description="Service name")
    price: str = Field(description="Price label, e.g. R170 or R170-R470")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Service name is required")
        return value

    @field_validator("price")
    @classmethod
    def price_label_format(cls, value: str) -> str:
        value = value.strip()
        if not is_valid_price_label(value):
            raise ValueError("Price must look like R170 or R170-R470")
        return value


# Router
router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=List[ServiceResponse])
def list_services(
    catalog: CatalogService = Depends(get_catalog_service),
) -> List[ServiceResponse]:
    """
    List all services ordered by name.
    """
    return [ServiceResponse.model_validate(s) for s in catalog.list_services()]


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceRequest,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    service = catalog.create_service(payload.name, payload.price)
    return ServiceResponse.model_validate(service)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: UUID,
    payload: ServiceRequest,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    service = catalog.update_service(service_id, payload.name, payload.price)
    return ServiceResponse.model_validate(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: UUID,
    catalog: CatalogService = Depends(get_catalog_service),
) -> None:
    """
    Hard-delete a service. Existing bookings keep their service_id.
    """
    catalog.delete_service(service_id)
