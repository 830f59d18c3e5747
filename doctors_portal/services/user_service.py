from sqlalchemy.orm import Session
from typing import List, Optional

from ..models.user import User
from ..core.security import create_access_token, UserRole
from ..schemas.base import DeleteResult, UpdateResult
from ..schemas.user import UserUpsert, TokenIssueResponse

# Fields a client may not set on its own record
PROTECTED_PROFILE_FIELDS = {"email", "role", "id"}

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def is_admin(self, email: str) -> bool:
        user = self.get_user(email)
        return user is not None and user.role == UserRole.ADMIN.value

    def issue_token(self, email: str, user_data: UserUpsert) -> TokenIssueResponse:
        """Upsert the user keyed by email and sign an access token for it."""
        fields = {}
        if user_data.name is not None:
            fields["name"] = user_data.name

        extra = {
            key: value for key, value in (user_data.model_extra or {}).items()
            if key not in PROTECTED_PROFILE_FIELDS
        }

        user = self.get_user(email)
        if user is not None and extra:
            # Reassign so the JSON column is flagged dirty
            fields["profile"] = {**(user.profile or {}), **extra}
        elif extra:
            fields["profile"] = extra

        result = self._upsert(email, fields)
        access_token = create_access_token({"email": email})

        return TokenIssueResponse(result=result, access_token=access_token)

    def set_role(self, email: str, role: Optional[UserRole]) -> UpdateResult:
        """Set or clear a user's role. Granting a role creates a missing user."""
        if role is None and self.get_user(email) is None:
            # Clearing a role never creates an account
            return UpdateResult(matched_count=0, modified_count=0)

        return self._upsert(email, {"role": role.value if role else None})

    def delete_user(self, email: str) -> DeleteResult:
        """Remove the user record, profile included."""
        deleted = self.db.query(User).filter(User.email == email).delete()
        self.db.commit()
        return DeleteResult(deleted_count=deleted)

    def _upsert(self, email: str, fields: dict) -> UpdateResult:
        user = self.get_user(email)

        if user is None:
            user = User(**{"email": email, "profile": {}, **fields})
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return UpdateResult(matched_count=0, modified_count=0, upserted_id=user.id)

        modified = False
        for key, value in fields.items():
            if getattr(user, key) != value:
                setattr(user, key, value)
                modified = True

        self.db.commit()
        return UpdateResult(matched_count=1, modified_count=int(modified))
