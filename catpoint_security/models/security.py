"""Security system data models."""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class ArmingStatus(Enum):
    """Arming modes of the security system."""
    DISARMED = "Disarmed"
    ARMED_HOME = "Armed - At Home"
    ARMED_AWAY = "Armed - Away"

    @property
    def description(self) -> str:
        return self.value

    @property
    def is_armed(self) -> bool:
        return self is not ArmingStatus.DISARMED


class AlarmStatus(Enum):
    """Escalation levels of the alarm."""
    NO_ALARM = "Cool and Good"
    PENDING_ALARM = "I'm in Danger..."
    ALARM = "Awooga!"

    @property
    def description(self) -> str:
        return self.value


class SensorType(Enum):
    """Kinds of sensor that can be installed."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"


@dataclass(eq=False)
class Sensor:
    """A door, window or motion sensor.

    Sensors are identified by ``sensor_id`` so that a sensor stays the same
    member of a set while its active flag changes.
    """
    name: str
    sensor_type: SensorType
    active: bool = False
    sensor_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.sensor_id == other.sensor_id

    def __hash__(self) -> int:
        return hash(self.sensor_id)

    def __lt__(self, other: "Sensor") -> bool:
        return self._sort_key() < other._sort_key()

    def _sort_key(self) -> tuple:
        return (self.name, self.sensor_type.name, str(self.sensor_id))
