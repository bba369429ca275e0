"""Bot runtime: connection supervisor and behavior scheduler."""

from afkbot.bots.behavior import BehaviorScheduler, MovementStatus
from afkbot.bots.supervisor import AfkBot, BotState
from afkbot.bots.timers import TimerSet

__all__ = [
    "AfkBot",
    "BehaviorScheduler",
    "BotState",
    "MovementStatus",
    "TimerSet",
]
