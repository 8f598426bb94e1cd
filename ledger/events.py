"""Planting lifecycle events.

Each stored ``planting_events`` row becomes one of six immutable event
classes. Rows with an unknown ``event_type`` or an unparsable
``event_date`` are dropped here, so the summarizer only ever sees
well-formed events.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .dates import parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlantingEvent:
    """Fields shared by every lifecycle event."""
    planting_id: Optional[int]
    event_date: object  # datetime.date
    bed_id: Optional[int] = None
    location_name: Optional[str] = None
    nursery_id: Optional[object] = None
    nursery_name: Optional[str] = None

    event_type = None


@dataclass(frozen=True)
class NurserySeeded(PlantingEvent):
    event_type = "nursery_seeded"


@dataclass(frozen=True)
class DirectSeeded(PlantingEvent):
    event_type = "direct_seeded"


@dataclass(frozen=True)
class Transplanted(PlantingEvent):
    event_type = "transplanted"


@dataclass(frozen=True)
class Moved(PlantingEvent):
    event_type = "moved"


@dataclass(frozen=True)
class Harvested(PlantingEvent):
    event_type = "harvested"

    qty: Optional[float] = None
    weight_grams: Optional[float] = None
    quantity_unit: Optional[str] = None


@dataclass(frozen=True)
class Removed(PlantingEvent):
    event_type = "removed"


EVENT_TYPES = {
    cls.event_type: cls
    for cls in (NurserySeeded, DirectSeeded, Transplanted, Moved, Harvested, Removed)
}

PLANTING_EVENT_LABELS = {
    "nursery_seeded": "Nursery sown",
    "direct_seeded": "Direct seeded",
    "transplanted": "Transplanted",
    "moved": "Moved",
    "harvested": "Harvest",
    "removed": "Removed",
}

PLANTING_STATUS_LABELS = {
    "nursery": "In Nursery",
    "planted": "Planted",
    "harvested": "Harvested",
    "removed": "Removed",
}


def _title_case(value):
    return str(value).replace("_", " ").title()


def format_event_type(event_type):
    return PLANTING_EVENT_LABELS.get(event_type) or _title_case(event_type)


def format_planting_status(status):
    return PLANTING_STATUS_LABELS.get(status) or _title_case(status)


def _field(record, name):
    """Read ``name`` from a mapping or an object, None when absent."""
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def event_from_record(record):
    """Build a typed event from a stored row (dict or ORM object).

    Returns None for rows that cannot take part in the lifecycle.
    """
    event_type = _field(record, "event_type")
    cls = EVENT_TYPES.get(event_type)
    if cls is None:
        logger.debug("Skipping planting event with unknown type %r", event_type)
        return None

    event_date = parse_date(_field(record, "event_date"))
    if event_date is None:
        logger.debug("Skipping %s event with unparsable date %r", event_type, _field(record, "event_date"))
        return None

    kwargs = {
        "planting_id": _field(record, "planting_id"),
        "event_date": event_date,
        "bed_id": _field(record, "bed_id"),
        "location_name": _field(record, "location_name"),
        "nursery_id": _field(record, "nursery_id"),
        "nursery_name": _field(record, "nursery_name"),
    }
    if cls is Harvested:
        kwargs["qty"] = _field(record, "qty")
        kwargs["weight_grams"] = _field(record, "weight_grams")
        kwargs["quantity_unit"] = _field(record, "quantity_unit")
    return cls(**kwargs)


def _with_parsed_date(event):
    """Typed events get the same date handling as stored rows."""
    event_date = parse_date(event.event_date)
    if event_date is None:
        logger.debug("Skipping %s event with unparsable date %r", event.event_type, event.event_date)
        return None
    if event_date is event.event_date:
        return event
    return replace(event, event_date=event_date)


def events_from_records(records):
    """Convert rows to events in chronological order.

    The sort is stable, so rows sharing a date keep their insertion order.
    """
    events = []
    for record in records or []:
        if isinstance(record, PlantingEvent):
            event = _with_parsed_date(record)
        else:
            event = event_from_record(record)
        if event is not None:
            events.append(event)
    events.sort(key=lambda e: e.event_date)
    return events
