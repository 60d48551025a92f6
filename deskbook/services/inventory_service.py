"""
Inventory service
Admin management of desks and parking spots
"""
import logging
from datetime import date
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from deskbook.schemas.resource import ResourceCreate, ResourceUpdate
from deskbook.services.ledger import Ledger, ReservationLedger, is_unique_violation
from deskbook.utils.exceptions import (
    DuplicateException,
    HasFutureReservationsException,
    NotFoundException,
)

logger = logging.getLogger(__name__)


class InventoryService:
    """Inventory store for one resource kind"""

    @staticmethod
    def get_resource(db: Session, ledger: Ledger, resource_id: int):
        model = ledger.resource_model
        resource = db.query(model).filter(model.id == resource_id).first()
        if not resource:
            raise NotFoundException(f"{ledger.label} with ID {resource_id} not found")
        return resource

    @staticmethod
    def list_resources(db: Session, ledger: Ledger) -> List[dict]:
        """All resources, inactive included, with their reservation counts"""
        model = ledger.resource_model
        resources = db.query(model).order_by(model.code).all()
        return [
            {
                "id": r.id,
                "code": r.code,
                "name": r.name,
                "location_label": r.location_label if ledger.has_location_label else None,
                "is_active": r.is_active,
                "created_at": r.created_at,
                "reservations_count": ReservationLedger.count_for_resource(db, ledger, r.id),
            }
            for r in resources
        ]

    @staticmethod
    def _ensure_code_free(db: Session, ledger: Ledger, code: str) -> None:
        model = ledger.resource_model
        if db.query(model).filter(model.code == code).first():
            raise DuplicateException(f'{ledger.label} with code "{code}" already exists')

    @staticmethod
    def _commit_or_duplicate(db: Session, ledger: Ledger, code: str) -> None:
        # the unique index on code settles races the pre-check missed
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if not is_unique_violation(exc):
                raise
            raise DuplicateException(f'{ledger.label} with code "{code}" already exists')

    @staticmethod
    def create_resource(db: Session, ledger: Ledger, data: ResourceCreate):
        InventoryService._ensure_code_free(db, ledger, data.code)

        fields = {"code": data.code, "name": data.name}
        if ledger.has_location_label:
            fields["location_label"] = data.location_label
        resource = ledger.resource_model(**fields)
        db.add(resource)
        InventoryService._commit_or_duplicate(db, ledger, data.code)
        db.refresh(resource)
        logger.info("%s %s created", ledger.label, resource.code)
        return resource

    @staticmethod
    def update_resource(db: Session, ledger: Ledger, resource_id: int, data: ResourceUpdate):
        resource = InventoryService.get_resource(db, ledger, resource_id)

        update_data = data.model_dump(exclude_unset=True)
        if not ledger.has_location_label:
            update_data.pop("location_label", None)
        if update_data.get("code") and update_data["code"] != resource.code:
            InventoryService._ensure_code_free(db, ledger, update_data["code"])

        for field, value in update_data.items():
            if value is None and field != "location_label":
                continue
            setattr(resource, field, value)

        InventoryService._commit_or_duplicate(db, ledger, resource.code)
        db.refresh(resource)
        return resource

    @staticmethod
    def delete_resource(db: Session, ledger: Ledger, resource_id: int, today: date) -> None:
        """
        Hard delete. Refused while any reservation from today on references
        the resource; otherwise its past reservations and the resource go in
        one transaction.
        """
        resource = InventoryService.get_resource(db, ledger, resource_id)

        future = ReservationLedger.count_future_for_resource(db, ledger, resource_id, today)
        if future > 0:
            raise HasFutureReservationsException(
                future,
                f"{ledger.label} {resource.code} has {future} future reservations; "
                f"cancel them first or deactivate it instead",
            )

        model = ledger.reservation_model
        try:
            db.query(model).filter(model.resource_id == resource_id).delete(synchronize_session=False)
            db.delete(resource)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise
        logger.info("%s %s deleted", ledger.label, resource.code)
