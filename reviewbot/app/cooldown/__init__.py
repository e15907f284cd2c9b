from reviewbot.app.cooldown.scheduler import AsyncioScheduler, Handle, Scheduler
from reviewbot.app.cooldown.timer import CooldownTimer

__all__ = ["AsyncioScheduler", "CooldownTimer", "Handle", "Scheduler"]
