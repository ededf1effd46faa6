import pytest
from firebase_admin import messaging

from sosrelay.alerts.dispatcher import FirebasePublisher, NotificationDispatcher, to_fcm_message
from sosrelay.alerts.normalizer import build_notification
from sosrelay.alerts.validation import parse_alert_request
from sosrelay.config.settings import MessagingSettings
from sosrelay.domain.errors import DeliveryError


class StubPublisher:
    def __init__(self, error: Exception | None = None):
        self.sent = []
        self._error = error

    def publish(self, payload):
        if self._error is not None:
            raise self._error
        self.sent.append(payload)
        return f"projects/test/messages/{len(self.sent)}"


def _payload(sos_type: str = "sos_alert"):
    request = parse_alert_request(
        {"sos_id": "abc", "sos_type": sos_type, "location": {"latitude": 12.97, "longitude": 77.59}}
    )
    return build_notification(request, "bengaluru_urban", now=0)


def test_dispatch_returns_message_id():
    publisher = StubPublisher()
    message_id = NotificationDispatcher(publisher).dispatch(_payload())
    assert message_id == "projects/test/messages/1"
    assert publisher.sent[0].topic == "district-bengaluru_urban"


def test_dispatch_wraps_transport_errors():
    cause = RuntimeError("FCM unavailable")
    with pytest.raises(DeliveryError) as exc_info:
        NotificationDispatcher(StubPublisher(error=cause)).dispatch(_payload())
    assert exc_info.value.message == "FCM unavailable"
    assert exc_info.value.topic == "district-bengaluru_urban"
    assert exc_info.value.__cause__ is cause


def test_same_alert_twice_is_published_twice():
    publisher = StubPublisher()
    dispatcher = NotificationDispatcher(publisher)
    payload = _payload()
    assert dispatcher.dispatch(payload) != dispatcher.dispatch(payload)
    assert len(publisher.sent) == 2


def test_to_fcm_message_maps_platform_hints():
    message = to_fcm_message(_payload())
    assert isinstance(message, messaging.Message)
    assert message.topic == "district-bengaluru_urban"
    assert message.notification.title == "🚨 Emergency Alert"
    assert message.data["type"] == "sos_alert"
    assert message.android.notification.color == "#FF0000"
    assert message.android.notification.icon == "ic_notification"
    assert message.apns.payload.aps.badge == 1
    assert message.apns.payload.aps.alert.body == "SOS alert in BENGALURU_URBAN area"

    resolved = to_fcm_message(_payload("stop"))
    assert resolved.apns.payload.aps.badge == 0
    assert resolved.android.notification.color == "#00FF00"


def test_firebase_publisher_is_pending_until_first_publish():
    publisher = FirebasePublisher(MessagingSettings())
    assert publisher.status == "pending"
    assert NotificationDispatcher(publisher).publisher_status == "pending"
    assert NotificationDispatcher(StubPublisher()).publisher_status == "unknown"
