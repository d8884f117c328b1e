# backend/services/proctoring.py
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.timeutils import iso, utcnow
from services import assessments
from services.errors import BadRequest

logger = logging.getLogger(__name__)

EVENT_TYPES = frozenset({
    "visibility_hidden",
    "window_blur",
    "window_focus",
    "copy",
    "paste",
    "cut",
    "context_menu",
    "blocked_shortcut",
    "suspected_devtools",
    "heartbeat",
})


def _details(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return {"value": value}


def append_events(
    proctoring: Optional[Mapping],
    events: Iterable[Mapping[str, Any]],
    *,
    cap: int,
    at_iso: str,
) -> Dict[str, Any]:
    """
    Return a new proctoring document with ``events`` appended (stamped with
    ``at_iso``), per-type counts incremented and the event list trimmed to
    the newest ``cap`` entries. Counts are never trimmed.
    """
    proctoring = proctoring or {}
    counts = dict(proctoring.get("counts") or {})
    stored = list(proctoring.get("events") or [])

    for event in events:
        event_type = str(event.get("type"))
        counts[event_type] = counts.get(event_type, 0) + 1
        stored.append({
            "atIso": at_iso,
            "type": event_type,
            "details": _details(event.get("details")),
        })

    if cap >= 0 and len(stored) > cap:
        stored = stored[-cap:] if cap else []
    return {"counts": counts, "events": stored}


def log_events(db: Session, token: str, events: Any) -> int:
    if not isinstance(events, list):
        raise BadRequest("Missing events")

    assessment = assessments.get_by_token(db, token)
    cleaned = []
    for event in events:
        if not isinstance(event, Mapping):
            continue
        event_type = event.get("type")
        if not isinstance(event_type, str) or not event_type:
            continue
        if event_type not in EVENT_TYPES:
            logger.info("unknown proctoring event type", extra={"event_type": event_type})
        cleaned.append(event)

    assessment.proctoring = append_events(
        assessment.proctoring,
        cleaned,
        cap=settings.proctoring_event_cap,
        at_iso=iso(utcnow()),
    )
    db.add(assessment)
    db.commit()
    return len(cleaned)
