from apscheduler.schedulers.background import BackgroundScheduler

from config import settings
from database import SessionLocal
from modules.uploads.services.storage_sweep import delete_orphaned_files

def start_storage_sweep_job() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    def job():
        with SessionLocal() as session:
            delete_orphaned_files(session, settings.upload_dir, settings.storage_sweep_grace_minutes)

    scheduler.add_job(job, 'interval', hours=settings.storage_sweep_hours)
    scheduler.start()
    return scheduler
