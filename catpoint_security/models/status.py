"""Arming and alarm status models."""

from enum import Enum


class ArmingStatus(Enum):
    """Monitoring profile selected by the user."""
    DISARMED = "DISARMED"
    ARMED_HOME = "ARMED_HOME"
    ARMED_AWAY = "ARMED_AWAY"

    @property
    def is_armed(self) -> bool:
        return self is not ArmingStatus.DISARMED


class AlarmStatus(Enum):
    """Escalation level of a detected intrusion.

    Members are ordered NO_ALARM < PENDING_ALARM < ALARM.
    """
    NO_ALARM = "NO_ALARM"
    PENDING_ALARM = "PENDING_ALARM"
    ALARM = "ALARM"

    @property
    def level(self) -> int:
        return _LADDER.index(self)

    def escalate(self) -> "AlarmStatus":
        """Return the next rung of the ladder, saturating at ALARM."""
        return _LADDER[min(self.level + 1, len(_LADDER) - 1)]

    def __lt__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other):
        if not isinstance(other, AlarmStatus):
            return NotImplemented
        return self.level >= other.level


_LADDER = (AlarmStatus.NO_ALARM, AlarmStatus.PENDING_ALARM, AlarmStatus.ALARM)
