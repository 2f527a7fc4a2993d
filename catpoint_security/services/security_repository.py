"""Repository implementations for the security system state."""

import os
import sqlite3
import uuid
from contextlib import closing
from typing import Dict, Set, Optional

from ..exceptions import RepositoryError
from ..logging_config import get_logger
from ..models.security import ArmingStatus, AlarmStatus, Sensor, SensorType
from ..utils import ensure_directory_exists
from .error_handler import global_error_handler, ErrorSeverity
from .interfaces import SecurityRepositoryInterface

logger = get_logger("security_repository")


class InMemorySecurityRepository(SecurityRepositoryInterface):
    """Repository that keeps all state in memory.

    ``get_sensors`` returns the live set, so changes made to a returned sensor
    are visible to later readers.
    """

    def __init__(self, arming_status: ArmingStatus = ArmingStatus.DISARMED,
                 alarm_status: AlarmStatus = AlarmStatus.NO_ALARM):
        self.arming_status = arming_status
        self.alarm_status = alarm_status
        self.sensors: Set[Sensor] = set()

    def get_arming_status(self) -> ArmingStatus:
        return self.arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self.arming_status = arming_status

    def get_alarm_status(self) -> AlarmStatus:
        return self.alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self.alarm_status = alarm_status

    def get_sensors(self) -> Set[Sensor]:
        return self.sensors

    def add_sensor(self, sensor: Sensor) -> None:
        self.sensors.add(sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        self.sensors.discard(sensor)

    def update_sensor(self, sensor: Sensor) -> None:
        self.sensors.discard(sensor)
        self.sensors.add(sensor)


class SqliteSecurityRepository(SecurityRepositoryInterface):
    """Repository that persists arming status, alarm status and sensors in SQLite.

    Sensors are loaded once and kept in an identity map keyed by ``sensor_id``;
    ``get_sensors`` hands out those same objects and every change is written
    through to the database.
    """

    ARMING_STATUS_KEY = "arming_status"
    ALARM_STATUS_KEY = "alarm_status"

    def __init__(self, database_path: str = "data/security.db"):
        """
        Initialize the repository.

        Args:
            database_path: Path to the SQLite database file, created if missing

        Raises:
            RepositoryError: If the database cannot be created
        """
        self.database_path = database_path
        self._sensors: Optional[Dict[uuid.UUID, Sensor]] = None

        global_error_handler.register_component("security_repository")
        self._initialize_database()

    def _initialize_database(self) -> None:
        database_dir = os.path.dirname(self.database_path)
        if database_dir:
            ensure_directory_exists(database_dir)

        try:
            with closing(sqlite3.connect(self.database_path)) as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS settings (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS sensors (
                        sensor_id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        sensor_type TEXT NOT NULL,
                        active INTEGER NOT NULL DEFAULT 0
                    )
                """)
        except sqlite3.Error as e:
            self._fail("initialize database", e, ErrorSeverity.CRITICAL)

        logger.info(f"Security repository initialized at {self.database_path}")

    def _fail(self, operation: str, error: sqlite3.Error,
              severity: ErrorSeverity = ErrorSeverity.HIGH) -> None:
        global_error_handler.handle_error("security_repository", error, severity)
        raise RepositoryError(f"Failed to {operation}: {error}") from error

    def _get_setting(self, key: str) -> Optional[str]:
        try:
            with closing(sqlite3.connect(self.database_path)) as conn:
                row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            self._fail(f"read {key}", e)
        return row[0] if row else None

    def _set_setting(self, key: str, value: str) -> None:
        try:
            with closing(sqlite3.connect(self.database_path)) as conn, conn:
                conn.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, value))
        except sqlite3.Error as e:
            self._fail(f"write {key}", e)

    def get_arming_status(self) -> ArmingStatus:
        value = self._get_setting(self.ARMING_STATUS_KEY)
        return ArmingStatus[value] if value else ArmingStatus.DISARMED

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._set_setting(self.ARMING_STATUS_KEY, arming_status.name)

    def get_alarm_status(self) -> AlarmStatus:
        value = self._get_setting(self.ALARM_STATUS_KEY)
        return AlarmStatus[value] if value else AlarmStatus.NO_ALARM

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._set_setting(self.ALARM_STATUS_KEY, alarm_status.name)

    def _loaded_sensors(self) -> Dict[uuid.UUID, Sensor]:
        if self._sensors is None:
            self._sensors = self._load_sensors()
        return self._sensors

    def _load_sensors(self) -> Dict[uuid.UUID, Sensor]:
        try:
            with closing(sqlite3.connect(self.database_path)) as conn:
                rows = conn.execute("SELECT sensor_id, name, sensor_type, active FROM sensors").fetchall()
        except sqlite3.Error as e:
            self._fail("read sensors", e)

        sensors = {}
        for sensor_id, name, sensor_type, active in rows:
            sensor = Sensor(
                name=name,
                sensor_type=SensorType[sensor_type],
                active=bool(active),
                sensor_id=uuid.UUID(sensor_id)
            )
            sensors[sensor.sensor_id] = sensor

        logger.debug(f"Loaded {len(sensors)} sensors")
        return sensors

    def get_sensors(self) -> Set[Sensor]:
        return set(self._loaded_sensors().values())

    def add_sensor(self, sensor: Sensor) -> None:
        self.update_sensor(sensor)
        logger.debug(f"Added sensor {sensor.name} ({sensor.sensor_type.name})")

    def update_sensor(self, sensor: Sensor) -> None:
        sensors = self._loaded_sensors()
        try:
            with closing(sqlite3.connect(self.database_path)) as conn, conn:
                conn.execute("""
                    INSERT OR REPLACE INTO sensors (sensor_id, name, sensor_type, active)
                    VALUES (?, ?, ?, ?)
                """, (str(sensor.sensor_id), sensor.name, sensor.sensor_type.name, int(sensor.active)))
        except sqlite3.Error as e:
            self._fail(f"save sensor {sensor.name}", e)
        sensors[sensor.sensor_id] = sensor

    def remove_sensor(self, sensor: Sensor) -> None:
        sensors = self._loaded_sensors()
        try:
            with closing(sqlite3.connect(self.database_path)) as conn, conn:
                conn.execute("DELETE FROM sensors WHERE sensor_id = ?", (str(sensor.sensor_id),))
        except sqlite3.Error as e:
            self._fail(f"remove sensor {sensor.name}", e)
        sensors.pop(sensor.sensor_id, None)
        logger.debug(f"Removed sensor {sensor.name}")
