from .application import Application
from .scheduler import CronJob, Scheduler

__all__ = ["Application", "CronJob", "Scheduler"]
