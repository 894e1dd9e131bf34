from app.infrastructure.notifications.hub import (
    NotificationHub,
    QueueConnection,
    new_contact_event,
)


__all__ = ["NotificationHub", "QueueConnection", "new_contact_event"]
