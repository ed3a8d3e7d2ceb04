import time
from datetime import datetime, timedelta
from typing import Optional, Tuple

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import settings
from modules.auth.schemas.auth_schemas import Principal, RegisterRequest, normalize_email
from modules.common.errors import Conflict, Unauthenticated, ValidationFailed
from modules.logs.models.log import LogStatus
from modules.logs.services.log_service import LOGIN, REGISTER, LogService
from modules.users.models.user import User, UserRole

logger = structlog.get_logger(__name__)

BCRYPT_ROUNDS = 12
REQUIRED_REGISTER_FIELDS = ['nomor_id', 'nama_lengkap', 'email', 'password', 'divisi', 'cabang']

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

class AuthService:

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def principal_for(user: User) -> Principal:
        return Principal(
            id=user.id,
            role=user.role,
            divisi=user.divisi,
            cabang=user.cabang,
            nomor_id=user.nomor_id,
            name=user.nama_lengkap,
        )

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str, ip: str = "0.0.0.0") -> User:
        """Looks the user up by email and checks the bcrypt hash; every outcome is audited"""
        user = db.query(User).filter(User.email == normalize_email(email)).first()
        if not user:
            logger.info("login_failed", reason="unknown_email")
            raise Unauthenticated("Email tidak terdaftar")
        if not AuthService.verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=user.id)
            LogService.record(
                db, user.id, LOGIN, f"Failed login attempt for {user.nama_lengkap}",
                ip=ip, status=LogStatus.FAILURE,
            )
            raise Unauthenticated("Password salah")

        LogService.record(db, user.id, LOGIN, f"User {user.nama_lengkap} logged in", ip=ip)
        return user

    @staticmethod
    def register_user(db: Session, data: RegisterRequest, ip: str = "0.0.0.0") -> User:
        for field in REQUIRED_REGISTER_FIELDS:
            if not getattr(data, field):
                raise ValidationFailed(f"Field {field} wajib diisi")

        email = normalize_email(data.email)
        if "@" not in email:
            raise ValidationFailed("Format email tidak valid")
        if db.query(User).filter(User.email == email).first():
            raise Conflict("Email sudah terdaftar")
        if db.query(User).filter(User.nomor_id == data.nomor_id).first():
            raise Conflict("Nomor ID sudah terdaftar")

        user = User(
            nomor_id=data.nomor_id,
            nama_lengkap=data.nama_lengkap,
            email=email,
            password_hash=AuthService.get_password_hash(data.password),
            divisi=data.divisi,
            cabang=data.cabang,
            # Whatever the client sent, self-registered accounts are staff
            role=UserRole.NON_IT,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent registration took the email or employee number after the checks above
            db.rollback()
            raise Conflict("Email atau Nomor ID sudah terdaftar")
        db.refresh(user)

        LogService.record(db, user.id, REGISTER, f"User {user.nama_lengkap} registered", ip=ip)
        logger.info("user_registered", user_id=user.id)
        return user

    @staticmethod
    def create_session_token(principal: Principal, expires_delta: Optional[timedelta] = None) -> str:
        """Signs a session token carrying the principal's id, role, division, branch and employee number"""
        now = datetime.utcnow()
        expire = now + (expires_delta or timedelta(seconds=settings.session_max_age_seconds))
        to_encode = {
            "sub": str(principal.id),
            "role": principal.role.value,
            "divisi": principal.divisi,
            "cabang": principal.cabang,
            "nomor_id": principal.nomor_id,
            "name": principal.name,
            "iat": int(time.time()),
            "exp": expire,
        }
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    @staticmethod
    def verify_token(token: str) -> Optional[Tuple[Principal, int]]:
        """Returns the principal and the token's issue time, or None when invalid or expired"""
        try:
            payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
            principal = Principal(
                id=int(payload["sub"]),
                role=UserRole(payload["role"]),
                divisi=payload["divisi"],
                cabang=payload["cabang"],
                nomor_id=payload["nomor_id"],
                name=payload.get("name", ""),
            )
            return principal, int(payload.get("iat", 0))
        except (JWTError, KeyError, ValueError):
            return None

    @staticmethod
    def needs_refresh(issued_at: int) -> bool:
        """Sliding session: re-issue once the token is older than the update age"""
        age = time.time() - issued_at
        return age >= settings.session_update_age_seconds

    @staticmethod
    def get_current_user(db: Session, principal: Principal) -> Optional[User]:
        return db.get(User, principal.id)
