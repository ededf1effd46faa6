"""
Notification dispatcher.

`NotificationDispatcher.dispatch()` publishes one message and returns the delivery
id, or raises `DeliveryError` wrapping the transport failure. There is no retry and
no de-duplication: sending the same alert id twice produces two notifications, and
retrying is left to the HTTP caller.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

import firebase_admin
from firebase_admin import credentials, messaging

from sosrelay.config.settings import MessagingSettings
from sosrelay.core.env import resolve_project_path
from sosrelay.domain.errors import DeliveryError
from sosrelay.domain.models import NotificationPayload

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "sosrelay"


class Publisher(Protocol):
    def publish(self, payload: NotificationPayload) -> str: ...


def to_fcm_message(payload: NotificationPayload) -> messaging.Message:
    """Map a `NotificationPayload` onto the Firebase Admin message types."""
    android = payload.android
    apns = payload.apns
    return messaging.Message(
        topic=payload.topic,
        notification=messaging.Notification(title=payload.title, body=payload.body),
        data=dict(payload.data),
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                icon=android.icon,
                color=android.color,
                sound=android.sound,
                priority=android.priority,
                default_sound=android.default_sound,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=apns.title, body=apns.body),
                    sound=apns.sound,
                    badge=apns.badge,
                )
            )
        ),
    )


class FirebasePublisher:
    """Publishes to FCM topics through a lazily initialized Firebase app."""

    def __init__(self, settings: MessagingSettings):
        self._settings = settings
        self._app: firebase_admin.App | None = None
        self._lock = threading.Lock()

    @property
    def status(self) -> str:
        """Whether the lazy Firebase app exists yet (`initialized`) or not (`pending`)."""
        return "initialized" if self._app is not None else "pending"

    def _initialize_app(self) -> firebase_admin.App:
        try:
            return firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            pass

        credential = None
        if self._settings.credentials_path:
            credential = credentials.Certificate(str(resolve_project_path(self._settings.credentials_path)))
        options = {"projectId": self._settings.project_id} if self._settings.project_id else None
        app = firebase_admin.initialize_app(credential, options, name=FIREBASE_APP_NAME)
        logger.info(
            "Firebase app initialized (credentials=%s)",
            "service-account" if credential else "application-default",
        )
        return app

    def app(self) -> firebase_admin.App:
        if self._app is None:
            with self._lock:
                if self._app is None:
                    self._app = self._initialize_app()
        return self._app

    def publish(self, payload: NotificationPayload) -> str:
        return messaging.send(to_fcm_message(payload), dry_run=self._settings.dry_run, app=self.app())


class NotificationDispatcher:
    def __init__(self, publisher: Publisher):
        self._publisher = publisher

    @property
    def publisher_status(self) -> str:
        return getattr(self._publisher, "status", "unknown")

    def dispatch(self, payload: NotificationPayload) -> str:
        """Publish `payload`; return the message id or raise `DeliveryError`."""
        try:
            message_id = self._publisher.publish(payload)
        except Exception as e:
            logger.error("Publishing to %s failed: %s", payload.topic, e)
            raise DeliveryError(str(e) or type(e).__name__, topic=payload.topic) from e
        logger.info("Published to %s (message_id=%s)", payload.topic, message_id)
        return message_id
