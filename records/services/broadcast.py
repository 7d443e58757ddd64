"""
Push dashboard refresh notifications to connected WebSocket clients.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"


def broadcast_refresh(*keys: str) -> None:
    """Send a ``dashboard.refresh`` event naming the stale data keys."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {"type": "dashboard.refresh", "version": int(now.timestamp()), "ts": now.isoformat(), "keys": list(keys)[:50]}
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception:
        logger.warning('dashboard refresh broadcast failed', exc_info=True)
