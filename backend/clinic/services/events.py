"""
backend/clinic/services/events.py

Event emitter: pushes scheduling events to a Redis list for downstream
consumers (notifications, calendar sync).

Queue:
- events:p2p: plan scheduled, appointment booked or cancelled, grid regenerated
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit an event.

    Publication is best effort: a Redis failure is logged and swallowed so
    it never undoes a committed scheduling write.
    """
    if not settings.events_enabled:
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(P2P_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
