"""Notification filtering by event name and device identity.

Filter chain (evaluated in order)::

    1. ``name`` present and ≠ configured event name         → drop
    2. ``device_id`` in ``drop_device_ids``                 → drop
    3. ``keep_device_ids`` non-empty AND id not in list     → drop
    4. Otherwise                                            → pass
"""

from __future__ import annotations

import logging
from typing import Optional

from conn_event_decoder.config import FilterConfig
from conn_event_decoder.models import Notification

logger = logging.getLogger(__name__)


class EventFilter:
    """Stateless filter that decides whether a notification is decoded."""

    def __init__(self, config: FilterConfig, event_name: str = "connEventStats") -> None:
        self._event_name = event_name
        self._drop_device_ids: set[str] = set(config.drop_device_ids)
        self._keep_device_ids: set[str] = set(config.keep_device_ids)

    def __call__(self, notification: Notification) -> Optional[Notification]:
        """Return *notification* if it passes all filters, else ``None``."""
        return self.apply(notification)

    def apply(self, notification: Notification) -> Optional[Notification]:
        """Evaluate the filter chain.

        Parameters
        ----------
        notification:
            Validated notification from the classifier.

        Returns
        -------
        Notification or None
            The input unchanged when it passes, ``None`` when filtered.
        """
        device_id = notification.device_id

        # 1. Other event streams sharing the same feed
        if notification.name is not None and notification.name != self._event_name:
            logger.debug(
                "Filtered device %s: event name %s", device_id, notification.name
            )
            return None

        # 2. Explicit device ID deny-list
        if device_id in self._drop_device_ids:
            logger.debug("Filtered device %s: in drop_device_ids", device_id)
            return None

        # 3. Keep-list (allow-list)
        if self._keep_device_ids and device_id not in self._keep_device_ids:
            logger.debug("Filtered device %s: not in keep_device_ids", device_id)
            return None

        return notification
