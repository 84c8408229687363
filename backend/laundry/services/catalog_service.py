"""
Service catalog store operations.
"""
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from laundry.lib.logging import get_logger
from laundry.models.services import Service


logger = get_logger(__name__)


class ServiceNotFoundError(LookupError):
    """Raised when a service id does not exist."""

    def __init__(self, service_id: UUID):
        super().__init__(f"Service {service_id} not found")
        self.service_id = service_id


class CatalogService:
    """Create, read, update and hard-delete laundry services."""

    def __init__(self, db: Session):
        self.db = db

    def list_services(self) -> List[Service]:
        stmt = select(Service).order_by(Service.name)
        return list(self.db.execute(stmt).scalars().all())

    def get_service(self, service_id: UUID) -> Service:
        service = self.db.get(Service, service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        return service

    def create_service(self, name: str, price: str) -> Service:
        service = Service(name=name, price=price)
        self.db.add(service)
        self._commit()
        self.db.refresh(service)

        logger.info("Service created", extra={"service_id": str(service.id), "service_name": name})
        return service

    def update_service(self, service_id: UUID, name: str, price: str) -> Service:
        service = self.get_service(service_id)
        service.name = name
        service.price = price
        self._commit()
        self.db.refresh(service)

        logger.info("Service updated", extra={"service_id": str(service_id)})
        return service

    def delete_service(self, service_id: UUID) -> None:
        """
        Hard delete. Bookings that reference the service are left untouched
        and resolve to no service afterwards.
        """
        service = self.get_service(service_id)
        self.db.delete(service)
        self._commit()

        logger.info("Service deleted", extra={"service_id": str(service_id)})

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
