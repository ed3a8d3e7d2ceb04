from typing import List

import structlog
from sqlalchemy.orm import Session, joinedload

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.permission import Action, can_mutate
from modules.common.errors import Forbidden
from modules.logs.models.log import Log, LogStatus

logger = structlog.get_logger(__name__)

DEFAULT_LOG_PAGE = 100

# Audit entry types
LOGIN = "LOGIN"
REGISTER = "REGISTER"
CREATE = "CREATE"
UPDATE = "UPDATE"


class LogService:

    @staticmethod
    def record(
        session: Session,
        user_id: int,
        log_type: str,
        description: str,
        ip: str = "system",
        status: LogStatus = LogStatus.SUCCESS,
    ) -> Log:
        """Appends an audit entry. Committed on its own, after the action it describes."""
        entry = Log(
            user_id=user_id,
            type=log_type,
            description=description,
            status=status,
            ip=ip,
        )
        session.add(entry)
        session.commit()
        logger.info("audit_log_written", user_id=user_id, type=log_type, status=status.value)
        return entry

    @staticmethod
    def list_logs(session: Session, actor: Principal, limit: int = DEFAULT_LOG_PAGE) -> List[Log]:
        if not can_mutate(actor, Log, Action.READ_LOGS):
            raise Forbidden("Forbidden")
        return (
            session.query(Log)
            .options(joinedload(Log.user))
            .order_by(Log.timestamp.desc(), Log.id.desc())
            .limit(limit)
            .all()
        )
