"""Error tracking for the security system's collaborators."""

import traceback
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Callable, Any
from dataclasses import dataclass, field
from enum import Enum

from ..logging_config import get_logger

logger = get_logger("error_handler")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComponentStatus(Enum):
    """Component status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""
    recovery_attempted: bool = False
    recovery_successful: bool = False


class ErrorHandler:
    """Records collaborator failures and tracks component health.

    Errors are recorded, never swallowed: callers report the failure here and
    then raise it to their own caller.
    """

    def __init__(self, max_records: int = 1000):
        self.max_records = max_records
        self.error_records: List[ErrorRecord] = []
        self.component_error_counts: Dict[str, int] = {}
        self.component_recovery_attempts: Dict[str, int] = {}
        self.component_max_recovery_attempts: Dict[str, int] = {}
        self.recovery_callbacks: Dict[str, List[Callable[[], None]]] = {}
        self.component_status: Dict[str, ComponentStatus] = {}
        self._lock = threading.Lock()

    def register_component(self, component_name: str, max_recovery_attempts: int = 3) -> None:
        """Register a component for error tracking."""
        with self._lock:
            self.component_error_counts.setdefault(component_name, 0)
            self.component_recovery_attempts[component_name] = 0
            self.component_max_recovery_attempts[component_name] = max_recovery_attempts
            self.recovery_callbacks.setdefault(component_name, [])
            self.component_status[component_name] = ComponentStatus.HEALTHY
        logger.debug(f"Component registered: {component_name}")

    def register_recovery_callback(self, component_name: str, callback: Callable[[], None]) -> None:
        """Register a recovery callback for a component."""
        with self._lock:
            self.recovery_callbacks.setdefault(component_name, []).append(callback)
        logger.debug(f"Recovery callback registered for {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity = ErrorSeverity.MEDIUM) -> ErrorRecord:
        """Record an error from a component."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str="".join(traceback.format_exception(type(error), error, error.__traceback__))
        )

        with self._lock:
            self.error_records.append(error_record)
            if len(self.error_records) > self.max_records:
                self.error_records = self.error_records[-self.max_records:]

            self.component_error_counts[component_name] = self.component_error_counts.get(component_name, 0) + 1

            if severity == ErrorSeverity.CRITICAL:
                self.component_status[component_name] = ComponentStatus.FAILED
            elif severity == ErrorSeverity.HIGH:
                self.component_status[component_name] = ComponentStatus.DEGRADED
            else:
                self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)

        logger.error(f"Error in {component_name}: {error} (Severity: {severity.value})")
        return error_record

    def attempt_recovery(self, component_name: str) -> bool:
        """Run the recovery callbacks of a component.

        Returns True when every callback ran without raising.
        """
        with self._lock:
            attempts = self.component_recovery_attempts.get(component_name, 0)
            max_attempts = self.component_max_recovery_attempts.get(component_name, 0)
            callbacks = list(self.recovery_callbacks.get(component_name, []))

        if attempts >= max_attempts:
            logger.warning(f"Max recovery attempts reached for {component_name}")
            return False
        if not callbacks:
            return False

        with self._lock:
            self.component_recovery_attempts[component_name] = attempts + 1

        try:
            for callback in callbacks:
                callback()
        except Exception as e:
            logger.error(f"Recovery failed for {component_name}: {e}")
            return False

        with self._lock:
            self.component_status[component_name] = ComponentStatus.HEALTHY
        logger.info(f"Recovery succeeded for {component_name} (Attempt {attempts + 1})")
        return True

    def get_component_health(self) -> Dict[str, ComponentStatus]:
        """Get health status of all known components."""
        with self._lock:
            return dict(self.component_status)

    def is_system_degraded(self) -> bool:
        """Check if any component is degraded or failed."""
        return any(status in (ComponentStatus.DEGRADED, ComponentStatus.FAILED)
                   for status in self.get_component_health().values())

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            return {
                "total_errors": len(self.error_records),
                "component_error_counts": dict(self.component_error_counts),
                "component_recovery_attempts": dict(self.component_recovery_attempts),
                "system_degraded": any(status in (ComponentStatus.DEGRADED, ComponentStatus.FAILED)
                                       for status in self.component_status.values())
            }

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Get summary of errors in the last N hours."""
        cutoff_time = datetime.now() - timedelta(hours=hours)

        with self._lock:
            recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Reset error counts for a component or all components."""
        with self._lock:
            components = [component_name] if component_name else list(self.component_error_counts)
            for component in components:
                if component in self.component_error_counts:
                    self.component_error_counts[component] = 0
                    self.component_recovery_attempts[component] = 0
                    self.component_status[component] = ComponentStatus.HEALTHY


# Create global error handler instance
global_error_handler = ErrorHandler()
