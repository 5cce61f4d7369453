from datetime import datetime
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from carrental import database
from carrental.config import settings
from carrental.services.booking_service import BookingService

logger = logging.getLogger(__name__)


def complete_due_bookings_job() -> int:
    """Mark CONFIRMED bookings whose return date has passed as COMPLETED."""
    with database.get_db() as db:
        try:
            completed = BookingService(db).complete_due_bookings()
        except Exception as e:
            db.rollback()
            logger.error(f"Booking completion job failed: {e}", exc_info=True)
            return 0

    if completed:
        logger.info(f"Booking completion job completed {completed} booking(s)")
    return completed


def start_scheduler() -> BackgroundScheduler:
    """Start the background scheduler for periodic booking maintenance."""
    scheduler = BackgroundScheduler()
    interval = settings.booking_completion_interval_minutes

    if settings.booking_completion_job_enabled:
        scheduler.add_job(
            complete_due_bookings_job,
            trigger=IntervalTrigger(minutes=interval),
            id="booking_completion",
            name="Complete bookings past their return date",
            replace_existing=True,
            next_run_time=datetime.now(),
        )
    else:
        logger.info("Booking completion job is disabled via BOOKING_COMPLETION_JOB_ENABLED")

    scheduler.start()
    if settings.booking_completion_job_enabled:
        logger.info(f"Scheduler started - booking completion every {interval} minutes")
    else:
        logger.info("Scheduler started - no jobs scheduled")
    return scheduler
