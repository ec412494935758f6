"""User registration and profile service."""

import logging

from fastapi import HTTPException

from src.api.models import RegisterUserRequest, UpdateUserRequest, User, UserSummary
from src.config.constants import OPEN_LOAN_STATUSES
from src.config.settings import Settings
from src.infrastructure.repository import LedgerRepository, audit_log
from src.utils.data_uri import parse_media_type
from src.utils.dates import utc_now

logger = logging.getLogger(__name__)


def summarize_user(user: User) -> UserSummary:
    """Build the dashboard card for a user."""
    open_loans = [loan for loan in user.loans if loan.status in OPEN_LOAN_STATUSES]
    latest = max(open_loans, key=lambda loan: loan.created_at, default=None)
    return UserSummary(
        id=user.id,
        name=user.name,
        registration_type=user.registration_type,
        outstanding_balance=sum(loan.remaining_balance for loan in open_loans),
        latest_loan_type=latest.loan_type if latest else None,
        has_fund=user.fund is not None,
        created_at=user.created_at,
    )


class UserService:
    """Handles user CRUD operations."""

    def __init__(self, settings: Settings, repository: LedgerRepository) -> None:
        self.settings = settings
        self.repository = repository

    async def list_users(self) -> list[User]:
        return await self.repository.list_users()

    async def list_summaries(self) -> list[UserSummary]:
        return [summarize_user(u) for u in await self.repository.list_users()]

    async def get_user(self, user_id: str) -> User:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def register_user(self, request: RegisterUserRequest) -> User:
        """Register a user with their face photo."""
        fields = {
            "name": request.name.strip(),
            "contact": request.contact.strip(),
            "id_proof": request.id_proof.strip(),
        }
        blank = [name for name, value in fields.items() if not value]
        if blank:
            raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(blank)}")
        if parse_media_type(request.face_image) is None:
            raise HTTPException(status_code=400, detail="face_image must be a base64 data URI")

        async with self.repository.lock:
            user = User(
                id=await self.repository.allocate_id("user"),
                face_image=request.face_image,
                registration_type=request.registration_type,
                created_at=utc_now(),
                **fields,
            )
            await self.repository.save_user(user)
        audit_log("CREATE", "user", user.id)
        return user

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> User:
        """Update name, contact or ID proof."""
        changes = {
            k: v.strip()
            for k, v in request.model_dump(exclude_none=True).items()
        }
        if any(not v for v in changes.values()):
            raise HTTPException(status_code=400, detail="Fields cannot be blank")

        async with self.repository.lock:
            user = await self.get_user(user_id)
            user = user.model_copy(update=changes)
            await self.repository.save_user(user)
        audit_log("UPDATE", "user", user_id)
        return user

    async def delete_user(self, user_id: str) -> None:
        """Delete a user. Users with an outstanding balance cannot be deleted."""
        async with self.repository.lock:
            user = await self.get_user(user_id)
            if any(loan.status in OPEN_LOAN_STATUSES for loan in user.loans):
                raise HTTPException(
                    status_code=400, detail="User has open loans and cannot be deleted"
                )
            await self.repository.delete_user(user_id)
        audit_log("DELETE", "user", user_id)
