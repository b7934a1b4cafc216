"""
Transient user-facing notifications.

Services report outcomes ("Added to cart", "Cart sync failed") through a
Notifier instead of talking to the UI. The HTTP layer uses a Notifier per
request and returns what was raised with the response.
"""
from dataclasses import asdict, dataclass, field
from typing import Callable

from storefront.logging import get_logger

logger = get_logger(__name__)

VARIANT_DEFAULT = "default"
VARIANT_DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    variant: str = VARIANT_DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == VARIANT_DESTRUCTIVE

    def to_dict(self) -> dict:
        return asdict(self)


NotificationSink = Callable[[Notification], None]


@dataclass
class Notifier:
    """Collects notifications and fans them out to registered sinks."""

    sinks: list[NotificationSink] = field(default_factory=list)
    history: list[Notification] = field(default_factory=list)

    def notify(self, title: str, description: str = "", variant: str = VARIANT_DEFAULT) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        if notification.is_error:
            logger.warning("User notified of failure: %s", title)
        else:
            logger.debug("User notified: %s", title)
        for sink in self.sinks:
            sink(notification)
        return notification

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, VARIANT_DESTRUCTIVE)

    def drain(self) -> list[dict]:
        """Return and forget everything raised so far."""
        drained = [n.to_dict() for n in self.history]
        self.history.clear()
        return drained
