"""Alarm status rules.

Maps sensor events, arming changes and cat-detection results onto the
NO_ALARM -> PENDING_ALARM -> ALARM ladder:

1. Armed + sensor activated: climb one rung (saturates at ALARM).
2. PENDING_ALARM + last active sensor deactivated: back to NO_ALARM.
3. ALARM is never cleared by sensor events.
4. Cat seen while ARMED_HOME: ALARM, whatever the sensors say.
5. No cat seen and no sensor active: NO_ALARM (this can clear ALARM).
6. Disarm: NO_ALARM. Arm: every sensor reset to inactive, status unchanged.

The machine holds no state. Each handler receives a snapshot and returns a
Transition describing what should change; applying it is the caller's job.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..models.sensor import Sensor
from ..models.status import AlarmStatus, ArmingStatus


class TransitionTrigger(str, Enum):
    """What caused a rule evaluation."""
    SENSOR_ACTIVATED = "sensor_activated"
    SENSOR_DEACTIVATED = "sensor_deactivated"
    CAT_DETECTED = "cat_detected"
    CAT_ABSENT = "cat_absent"
    DISARMED = "disarmed"
    ARMED = "armed"


@dataclass(frozen=True)
class SecuritySnapshot:
    """Persisted state the rules are evaluated against."""
    arming_status: ArmingStatus
    alarm_status: AlarmStatus
    sensors: FrozenSet[Sensor] = frozenset()

    def any_sensor_active(self, ignoring: Optional[Sensor] = None) -> bool:
        return any(s.active for s in self.sensors if s != ignoring)


@dataclass
class Transition:
    """Outcome of a rule evaluation."""
    trigger: TransitionTrigger
    previous_status: AlarmStatus
    alarm_status: AlarmStatus
    sensor_changes: Dict[Sensor, bool] = field(default_factory=dict)
    reason: str = ""

    @property
    def status_changed(self) -> bool:
        return self.alarm_status != self.previous_status

    @property
    def is_noop(self) -> bool:
        return not self.status_changed and not self.sensor_changes


class AlarmStateMachine:
    """Pure decision logic for alarm status transitions."""

    def on_sensor_activated(self, snapshot: SecuritySnapshot, sensor: Sensor) -> Transition:
        current = snapshot.alarm_status
        changes = {} if sensor.active else {sensor: True}

        if not snapshot.arming_status.is_armed:
            return Transition(TransitionTrigger.SENSOR_ACTIVATED, current, current,
                              changes, "system disarmed, activation recorded only")

        if current == AlarmStatus.ALARM:
            return Transition(TransitionTrigger.SENSOR_ACTIVATED, current, current,
                              changes, "alarm already active")

        # Re-activating an already active sensor still climbs the ladder
        return Transition(TransitionTrigger.SENSOR_ACTIVATED, current, current.escalate(),
                          changes, f"sensor '{sensor.name}' activated while armed")

    def on_sensor_deactivated(self, snapshot: SecuritySnapshot, sensor: Sensor) -> Transition:
        current = snapshot.alarm_status

        if not sensor.active:
            return Transition(TransitionTrigger.SENSOR_DEACTIVATED, current, current,
                              reason="sensor already inactive")

        changes = {sensor: False}

        if current == AlarmStatus.ALARM:
            return Transition(TransitionTrigger.SENSOR_DEACTIVATED, current, current,
                              changes, "alarm is only cleared by disarming or camera evidence")

        if current == AlarmStatus.PENDING_ALARM and not snapshot.any_sensor_active(ignoring=sensor):
            return Transition(TransitionTrigger.SENSOR_DEACTIVATED, current, AlarmStatus.NO_ALARM,
                              changes, "last active sensor deactivated")

        return Transition(TransitionTrigger.SENSOR_DEACTIVATED, current, current, changes)

    def on_cat_detected(self, snapshot: SecuritySnapshot, present: bool) -> Transition:
        current = snapshot.alarm_status

        if present:
            if snapshot.arming_status == ArmingStatus.ARMED_HOME:
                return Transition(TransitionTrigger.CAT_DETECTED, current, AlarmStatus.ALARM,
                                  reason="cat detected while armed home")
            return Transition(TransitionTrigger.CAT_DETECTED, current, current,
                              reason="cat detected but not armed home")

        if not snapshot.any_sensor_active():
            return Transition(TransitionTrigger.CAT_ABSENT, current, AlarmStatus.NO_ALARM,
                              reason="no cat and no active sensors")

        return Transition(TransitionTrigger.CAT_ABSENT, current, current,
                          reason="no cat but sensors still active")

    def on_arming_changed(self, snapshot: SecuritySnapshot, arming_status: ArmingStatus) -> Transition:
        current = snapshot.alarm_status

        if not arming_status.is_armed:
            return Transition(TransitionTrigger.DISARMED, current, AlarmStatus.NO_ALARM,
                              reason="system disarmed")

        changes = {sensor: False for sensor in snapshot.sensors if sensor.active}
        return Transition(TransitionTrigger.ARMED, current, current, changes,
                          f"system armed ({arming_status.value}), sensors reset")
