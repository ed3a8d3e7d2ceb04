import structlog
from sqlalchemy.orm import Session

from modules.auth.schemas.auth_schemas import Principal
from modules.common.errors import NotFound, ValidationFailed
from modules.logs.services.log_service import UPDATE, LogService
from modules.users.models.user import User
from modules.users.schemas.user_schemas import ProfileUpdate

logger = structlog.get_logger(__name__)

class ProfileService:

    @staticmethod
    def get_profile(session: Session, actor: Principal) -> User:
        user = session.get(User, actor.id)
        if not user:
            raise NotFound("User not found")
        return user

    @staticmethod
    def update_profile(session: Session, actor: Principal, data: ProfileUpdate, ip: str = "system") -> User:
        user = ProfileService.get_profile(session, actor)

        changes = data.model_dump(exclude_unset=True)
        update_data = {}
        if changes.get("nama_lengkap") and changes["nama_lengkap"].strip():
            update_data["nama_lengkap"] = changes["nama_lengkap"].strip()
        if "profile_picture" in changes:
            update_data["profile_picture"] = changes["profile_picture"]

        if not update_data:
            raise ValidationFailed("No data to update")

        for field, value in update_data.items():
            setattr(user, field, value)
        session.commit()
        session.refresh(user)

        if "nama_lengkap" in update_data:
            description = f'User updated their profile name to "{user.nama_lengkap}"'
        else:
            description = "User updated their profile picture"
        LogService.record(session, user.id, UPDATE, description, ip=ip)

        logger.info("profile_updated", user_id=user.id, fields=sorted(update_data))
        return user
