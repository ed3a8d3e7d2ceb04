# create_tables.py
from database import engine, Base
# Model imports register every table on Base.metadata
from modules.users.models import User, Division, Branch  # noqa: F401
from modules.maintenance.models import MaintenanceIssue  # noqa: F401
from modules.projects.models import ProjectItem  # noqa: F401
from modules.events.models import Event  # noqa: F401
from modules.chat.models import Message  # noqa: F401
from modules.logs.models import Log  # noqa: F401
from modules.uploads.models import FileUpload  # noqa: F401
from modules.notifications.models import Notification  # noqa: F401

def create_tables():
    """Creates any missing table"""
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    create_tables()
