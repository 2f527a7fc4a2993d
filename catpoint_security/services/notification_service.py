"""Status listeners that report security events to people."""

import time
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from queue import Queue, Empty, Full
from typing import List, Dict, Any, Optional, Tuple

import requests

from ..config.defaults import SECURITY_CONSTANTS
from ..logging_config import get_logger
from ..models.security import AlarmStatus
from .error_handler import global_error_handler, ErrorSeverity
from .interfaces import StatusListener

logger = get_logger("notification_service")


class LoggingStatusListener(StatusListener):
    """Listener that logs every event and keeps a history of them."""

    def __init__(self, max_history: int = 100):
        self.max_history = max_history
        self.history: List[Tuple[datetime, str, Any]] = []

    def notify(self, alarm_status: AlarmStatus) -> None:
        logger.info(f"Alarm status: {alarm_status.description}")
        self._record("alarm_status", alarm_status)

    def cat_detected(self, cat_detected: bool) -> None:
        if cat_detected:
            logger.warning("DANGER - CAT DETECTED")
        else:
            logger.info("Camera clear")
        self._record("cat_detected", cat_detected)

    def sensor_status_changed(self) -> None:
        self._record("sensor_status_changed", None)

    def _record(self, event: str, value: Any) -> None:
        self.history.append((datetime.now(), event, value))
        if len(self.history) > self.max_history:
            del self.history[0]


@dataclass
class NotificationConfig:
    """Configuration for push notifications."""
    push_enabled: bool = True
    webhook_url: str = ""
    retry_attempts: int = 3
    cooldown_seconds: int = 60
    max_queue_size: int = 100
    timeout_seconds: float = SECURITY_CONSTANTS["PUSH_TIMEOUT_SECONDS"]


@dataclass
class NotificationMessage:
    """A push message waiting for delivery."""
    kind: str  # "alarm", "pending_alarm", "cat"
    title: str
    body: str
    timestamp: datetime = field(default_factory=datetime.now)
    retry_count: int = 0


class PushNotificationListener(StatusListener):
    """Listener that pushes alarm and cat events to a webhook.

    Events are queued and delivered by a background thread so the security
    service never waits on the network. Without a webhook URL messages are
    only logged (mock mode).
    """

    def __init__(self, config: Optional[NotificationConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or NotificationConfig()
        self.session = session or requests.Session()
        self.notification_queue: Queue = Queue(maxsize=self.config.max_queue_size)
        self.last_notification_time: Dict[str, datetime] = {}
        self.sent_count = 0
        self.failed_count = 0
        self.dropped_count = 0
        self.processing_thread = None
        self.running = False
        self._process_lock = threading.Lock()

        global_error_handler.register_component("notification_service")

        self.start_processing()

    def notify(self, alarm_status: AlarmStatus) -> None:
        if alarm_status == AlarmStatus.ALARM:
            self.queue_notification("alarm", "Alarm!", f"Alarm status: {alarm_status.description}")
        elif alarm_status == AlarmStatus.PENDING_ALARM:
            self.queue_notification("pending_alarm", "Sensor triggered",
                                    f"Alarm status: {alarm_status.description}")

    def cat_detected(self, cat_detected: bool) -> None:
        if cat_detected:
            self.queue_notification("cat", "Cat Detected!", "A cat was seen on the camera")

    def queue_notification(self, kind: str, title: str, body: str) -> bool:
        """Queue a message for delivery; returns False when it was dropped."""
        if not self.config.push_enabled:
            logger.debug("Push notifications disabled")
            return False

        try:
            self.notification_queue.put(NotificationMessage(kind=kind, title=title, body=body), block=False)
        except Full:
            self.dropped_count += 1
            logger.warning("Notification queue is full, dropping notification")
            return False

        logger.debug(f"Queued {kind} notification")
        return True

    def process_queue(self) -> int:
        """Deliver queued messages and return how many were handled.

        Calls are serialized, so a final flush never overlaps the background thread.
        """
        with self._process_lock:
            return self._drain_queue()

    def _drain_queue(self) -> int:
        processed_count = 0
        retries: List[NotificationMessage] = []

        while True:
            try:
                message = self.notification_queue.get(block=False)
            except Empty:
                break

            processed_count += 1
            if not self._check_cooldown(message.kind):
                logger.debug(f"{message.kind} notification skipped due to cooldown")
                continue

            if self._send(message):
                self._update_cooldown(message.kind)
            elif message.retry_count < self.config.retry_attempts:
                message.retry_count += 1
                retries.append(message)
                logger.debug(f"Re-queued notification for retry {message.retry_count}")

        for message in retries:
            try:
                self.notification_queue.put(message, block=False)
            except Full:
                self.dropped_count += 1

        return processed_count

    def _send(self, message: NotificationMessage) -> bool:
        if not self.config.webhook_url:
            logger.info(f"Mock push notification: {message.title} - {message.body}")
            self.sent_count += 1
            return True

        payload = {
            "kind": message.kind,
            "title": message.title,
            "body": message.body,
            "timestamp": message.timestamp.isoformat()
        }

        try:
            response = self.session.post(
                self.config.webhook_url,
                json=payload,
                timeout=self.config.timeout_seconds
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.failed_count += 1
            global_error_handler.handle_error("notification_service", e, ErrorSeverity.LOW)
            return False

        self.sent_count += 1
        logger.info(f"Push notification sent: {message.title}")
        return True

    def _check_cooldown(self, kind: str) -> bool:
        last_time = self.last_notification_time.get(kind)
        if last_time is None:
            return True
        return datetime.now() - last_time >= timedelta(seconds=self.config.cooldown_seconds)

    def _update_cooldown(self, kind: str) -> None:
        self.last_notification_time[kind] = datetime.now()

    def start_processing(self) -> None:
        """Start background delivery."""
        if self.running:
            return

        self.running = True
        self.processing_thread = threading.Thread(target=self._background_processor, daemon=True)
        self.processing_thread.start()
        logger.info("Notification processing started")

    def stop_processing(self) -> None:
        """Stop background delivery."""
        self.running = False
        if self.processing_thread and self.processing_thread.is_alive():
            self.processing_thread.join()
        logger.info("Notification processing stopped")

    def _background_processor(self) -> None:
        while self.running:
            self.process_queue()
            time.sleep(1.0)

    def get_notification_stats(self) -> Dict[str, Any]:
        """Get delivery statistics."""
        return {
            "queue_size": self.notification_queue.qsize(),
            "sent": self.sent_count,
            "failed": self.failed_count,
            "dropped": self.dropped_count,
            "mock_mode": not self.config.webhook_url,
            "running": self.running
        }
