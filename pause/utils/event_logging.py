"""
Pipeline event logging utilities for PAUSE (Tier 2 logging).

Appends one JSON object per line to a pipeline events file so a run can be
replayed or inspected after the fact. For detailed within-context logging
(Tier 1), use pause.utils.logger instead.

Usage:
    from pause.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        events_file,
        event_type="stage_completed",
        reference="builtin:latex-template",
        stage="render",
    )
"""

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from pause.utils.timestamp import now_exact

# Reference pipelines may run on worker threads; whole lines only
_write_lock = threading.Lock()


def log_pipeline_event(
    events_file: Optional[Path], event_type: str, reference: str, **extra_fields
) -> None:
    """
    Log an event to the pipeline event log.

    Does nothing when events_file is None (event logging disabled). A failed
    write is logged as a warning and never raised.

    Args:
        events_file: JSON Lines file to append to
        event_type: Type of event (e.g., "reference_started", "reference_failed")
        reference: Template reference the event belongs to
        **extra_fields: Additional event-specific fields (must be JSON serializable)
    """
    if events_file is None:
        return

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "reference": reference,
        **extra_fields,
    }
    line = json.dumps(event, default=str) + "\n"

    with _write_lock:
        try:
            events_file.parent.mkdir(parents=True, exist_ok=True)
            with open(events_file, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.warning(f"Could not write {event_type} event to {events_file}: {e}")


def read_events(
    events_file: Path,
    reference: Optional[str] = None,
    event_type: Optional[str] = None,
) -> List[Dict]:
    """
    Read events from the pipeline log, optionally filtered.

    Args:
        events_file: JSON Lines file written by log_pipeline_event()
        reference: Only events for this template reference
        event_type: Only events of this type

    Returns:
        List of event dicts in file order
    """
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if reference:
        events = [e for e in events if e.get("reference") == reference]
    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events
