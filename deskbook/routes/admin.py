"""
Admin API routes
Inventory, users and reservation oversight (ADMIN role only)
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from deskbook.database import get_db
from deskbook.dependencies import get_current_admin_user, get_today
from deskbook.models.user import User
from deskbook.schemas.common import Day
from deskbook.schemas.reservation import AdminReservationListResponse, ReservationType
from deskbook.schemas.resource import ResourceAdminResponse, ResourceCreate, ResourceResponse, ResourceUpdate
from deskbook.schemas.user import UserAdminResponse, UserCreate, UserResponse, UserUpdate
from deskbook.services.booking_service import BookingService
from deskbook.services.inventory_service import InventoryService
from deskbook.services.ledger import DESK_LEDGER, LEDGERS, PARKING_LEDGER, Ledger
from deskbook.services.user_service import UserService
from deskbook.utils.dates import week_after
from deskbook.utils.exceptions import ValidationException

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin_user)],
)


def _add_inventory_routes(ledger: Ledger, path: str) -> None:

    @router.get(path, response_model=List[ResourceAdminResponse], name=f"list_{ledger.kind}")
    async def list_resources(db: Session = Depends(get_db)):
        return InventoryService.list_resources(db, ledger)

    @router.post(path, response_model=ResourceResponse, status_code=status.HTTP_201_CREATED,
                 name=f"create_{ledger.kind}")
    async def create_resource(data: ResourceCreate, db: Session = Depends(get_db)):
        return InventoryService.create_resource(db, ledger, data)

    @router.patch(path + "/{resource_id}", response_model=ResourceResponse, name=f"update_{ledger.kind}")
    async def update_resource(resource_id: int, data: ResourceUpdate, db: Session = Depends(get_db)):
        return InventoryService.update_resource(db, ledger, resource_id, data)

    @router.delete(path + "/{resource_id}", name=f"delete_{ledger.kind}")
    async def delete_resource(
            resource_id: int,
            today: date = Depends(get_today),
            db: Session = Depends(get_db)
    ):
        InventoryService.delete_resource(db, ledger, resource_id, today)
        return {"success": True}


_add_inventory_routes(DESK_LEDGER, "/desks")
_add_inventory_routes(PARKING_LEDGER, "/parking")


@router.get("/users", response_model=List[UserAdminResponse])
async def list_users(
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """All users with reservation statistics"""
    return UserService.list_users(db, today)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user"""
    return UserService.create_user(db, user_data)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
        user_id: int,
        user_data: UserUpdate,
        admin: User = Depends(get_current_admin_user),
        db: Session = Depends(get_db)
):
    """Update a user; an admin cannot deactivate or demote their own account"""
    return UserService.update_user(db, user_id, user_data, admin)


@router.delete("/users/{user_id}")
async def delete_user(
        user_id: int,
        admin: User = Depends(get_current_admin_user),
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """Delete a user without future reservations"""
    UserService.delete_user(db, user_id, admin, today)
    return {"success": True}


@router.get("/reservations", response_model=AdminReservationListResponse)
async def list_reservations(
        type: ReservationType = Query(ReservationType.ALL),
        date_from: Optional[Day] = Query(None),
        date_to: Optional[Day] = Query(None),
        user_id: Optional[int] = Query(None),
        search: Optional[str] = Query(None),
        today: date = Depends(get_today),
        db: Session = Depends(get_db)
):
    """
    Reservations across both ledgers
    - defaults to the coming week
    """
    if type == ReservationType.ALL:
        ledgers = [DESK_LEDGER, PARKING_LEDGER]
    else:
        ledgers = [LEDGERS[type.value]]
    return BookingService.search(
        db,
        ledgers,
        date_from or today,
        date_to or week_after(today),
        user_id=user_id,
        search=search,
    )


@router.delete("/reservations/{reservation_id}")
async def delete_reservation(
        reservation_id: int,
        type: ReservationType = Query(...),
        admin: User = Depends(get_current_admin_user),
        db: Session = Depends(get_db)
):
    """Cancel any reservation"""
    if type == ReservationType.ALL:
        raise ValidationException("type must be desk or parking")
    BookingService.cancel(db, LEDGERS[type.value], reservation_id, admin)
    return {"success": True}
