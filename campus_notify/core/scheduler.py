import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from campus_notify.core.config import settings
from campus_notify.core.database import SessionLocal
from campus_notify.services.notification import notification_service

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def purge_old_notifications():
    db = SessionLocal()
    try:
        deleted = notification_service.purge_old(db, days=settings.NOTIFICATION_RETENTION_DAYS)
        db.commit()
        logger.info(f"Old notification purge finished: {deleted} rows deleted")
    except Exception as e:
        db.rollback()
        logger.error(f"Error purging old notifications: {e}", exc_info=True)
    finally:
        db.close()


def start_scheduler():
    if settings.TESTING:
        logger.info("Scheduler disabled in test environment")
        return

    if not scheduler.running:
        scheduler.add_job(
            purge_old_notifications,
            'cron',
            hour=3,
            minute=0,
            id='purge_old_notifications',
            name='Purge old read notifications',
            replace_existing=True
        )
        scheduler.start()
        logger.info("Scheduler started with daily notification purge job")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
