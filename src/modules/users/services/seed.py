import structlog
from sqlalchemy.orm import Session

from modules.auth.services.auth_service import AuthService
from modules.users.models import Branch, Division, User, UserRole

logger = structlog.get_logger(__name__)

DEMO_PASSWORD = "password123"

DIVISIONS = [
    ("Underwriting", "UW"),
    ("Claims", "CL"),
    ("Finance", "FN"),
    ("Human Resources", "HR"),
    ("Information Technology", "IT"),
    ("Marketing", "MK"),
    ("Operations", "OP"),
    ("Legal", "LG"),
]

BRANCHES = [
    "Jakarta Pusat", "Jakarta Selatan", "Surabaya", "Bandung", "Medan",
    "Makassar", "Semarang", "Yogyakarta", "Denpasar", "Palembang",
]

DEMO_USERS = [
    {
        "nomor_id": "IT-001",
        "nama_lengkap": "Administrator SIAR",
        "email": "admin@ramayana.co.id",
        "divisi": "Information Technology",
        "cabang": "Jakarta Pusat",
        "role": UserRole.IT,
    },
    {
        "nomor_id": "UW-001",
        "nama_lengkap": "Staff Underwriting",
        "email": "staff@ramayana.co.id",
        "divisi": "Underwriting",
        "cabang": "Jakarta Pusat",
        "role": UserRole.NON_IT,
    },
]

def seed_reference_data(session: Session) -> None:
    """Idempotent: only inserts divisions, branches and demo accounts that are missing"""
    existing_divisions = {name for (name,) in session.query(Division.name).all()}
    for name, code in DIVISIONS:
        if name not in existing_divisions:
            session.add(Division(name=name, code=code))

    existing_branches = {name for (name,) in session.query(Branch.name).all()}
    for name in BRANCHES:
        if name not in existing_branches:
            session.add(Branch(name=name))

    existing_emails = {email for (email,) in session.query(User.email).all()}
    password_hash = None
    for data in DEMO_USERS:
        if data["email"] in existing_emails:
            continue
        password_hash = password_hash or AuthService.get_password_hash(DEMO_PASSWORD)
        session.add(User(password_hash=password_hash, **data))
        logger.info("demo_user_created", email=data["email"])

    session.commit()
