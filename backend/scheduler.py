from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from tasks.daily_summary import run_daily_summary
from utils.dates import APP_TIMEZONE

scheduler = BackgroundScheduler()

# Snapshot the herd and the day's totals shortly before midnight
scheduler.add_job(run_daily_summary, CronTrigger(hour=23, minute=55, timezone=APP_TIMEZONE), id='daily_summary_job')
