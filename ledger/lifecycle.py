"""Derived lifecycle summary for a single planting.

The summary is recomputed from the planting's event history on demand.
A single forward pass over the events records the first nursery start,
the first planting into a bed, the end of the planting (harvest or
removal) and where the planting currently sits. Durations and the
projected harvest window follow from those dates and the variety's
days-to-maturity (DTM) ranges.

``now`` is always supplied by the caller so the same inputs give the
same summary.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional

from .dates import add_days_utc, days_between
from .events import (
    DirectSeeded,
    Harvested,
    Moved,
    NurserySeeded,
    Removed,
    Transplanted,
    events_from_records,
)

DIRECT_SEED = "Direct Seed"
TRANSPLANT = "Transplant"

STATUS_NURSERY = "nursery"
STATUS_PLANTED = "planted"
STATUS_HARVESTED = "harvested"
STATUS_REMOVED = "removed"


@dataclass(frozen=True)
class CropVarietyMaturity:
    dtm_direct_seed_min: Optional[int] = None
    dtm_direct_seed_max: Optional[int] = None
    dtm_transplant_min: Optional[int] = None
    dtm_transplant_max: Optional[int] = None

    @classmethod
    def from_record(cls, record):
        """Build from a crop variety row (dict or ORM object); None gives empty maturity."""
        if record is None:
            return cls()
        if isinstance(record, cls):
            return record
        values = {}
        for f in fields(cls):
            values[f.name] = record.get(f.name) if isinstance(record, dict) else getattr(record, f.name, None)
        return cls(**values)


@dataclass(frozen=True)
class HarvestQuantity:
    qty: float
    unit: Optional[str] = None


@dataclass(frozen=True)
class PlantingSummary:
    nursery_started_date: object = None
    planted_date: object = None
    ended_date: object = None
    projected_harvest_start: object = None
    projected_harvest_end: object = None
    nursery_days: int = 0
    field_days: int = 0
    total_days: int = 0
    current_location_label: Optional[str] = None
    moves_count: int = 0
    harvest_quantity: Optional[HarvestQuantity] = None
    harvest_weight_grams: Optional[float] = None
    propagation_method: Optional[str] = None
    initial_quantity: Optional[int] = None
    status: Optional[str] = None

    def to_dict(self):
        """JSON-friendly rendering; dates become ISO strings."""
        def iso(d):
            return d.isoformat() if d is not None else None

        return {
            "nursery_started_date": iso(self.nursery_started_date),
            "planted_date": iso(self.planted_date),
            "ended_date": iso(self.ended_date),
            "projected_harvest_start": iso(self.projected_harvest_start),
            "projected_harvest_end": iso(self.projected_harvest_end),
            "nursery_days": self.nursery_days,
            "field_days": self.field_days,
            "total_days": self.total_days,
            "current_location_label": self.current_location_label,
            "moves_count": self.moves_count,
            "harvest_quantity": (
                {"qty": self.harvest_quantity.qty, "unit": self.harvest_quantity.unit}
                if self.harvest_quantity is not None else None
            ),
            "harvest_weight_grams": self.harvest_weight_grams,
            "propagation_method": self.propagation_method,
            "initial_quantity": self.initial_quantity,
            "status": self.status,
        }


def _positive(value):
    return value is not None and value > 0


def normalize_min_max(min_days, max_days):
    """Fill a missing or non-positive DTM bound from the other one.

    Returns ``(min, max)``, both >= 0.
    """
    if _positive(min_days):
        normalized_min = min_days
    elif _positive(max_days):
        normalized_min = max_days
    else:
        normalized_min = 0
    normalized_max = max_days if _positive(max_days) else normalized_min
    return normalized_min, normalized_max


def normalize_dtm(ds_min, ds_max, tp_min, tp_max):
    """Normalize both DTM ranges of a crop variety at once."""
    ds_min, ds_max = normalize_min_max(ds_min, ds_max)
    tp_min, tp_max = normalize_min_max(tp_min, tp_max)
    return {"ds_min": ds_min, "ds_max": ds_max, "tp_min": tp_min, "tp_max": tp_max}


def bed_label(event):
    """Location label for an event that puts the planting into a bed."""
    if event.bed_id is None:
        return None
    return f"Bed #{event.bed_id} @ {event.location_name or 'Unknown'}"


def summarize_planting(events, maturity=None, propagation_method=None,
                       initial_quantity=None, *, now):
    """Derive the lifecycle summary of one planting.

    Args:
        events: the planting's events, as typed events or stored rows.
            Malformed rows are ignored; order is re-established by date.
        maturity: ``CropVarietyMaturity`` or a crop variety row.
        propagation_method: ``"Direct Seed"``, ``"Transplant"`` or other.
        initial_quantity: the planting's starting quantity.
        now: reference date for open-ended durations.

    Returns:
        ``PlantingSummary``. A planting without events yields null dates and
        zero durations.
    """
    maturity = CropVarietyMaturity.from_record(maturity)
    if isinstance(now, datetime):
        now = now.date()

    nursery_started = None
    planted = None
    ended = None
    location_label = None
    moves = 0
    harvest_quantity = None
    harvest_weight = None
    harvested = False
    removed = False
    has_transplant = False

    for event in events_from_records(events):
        if isinstance(event, NurserySeeded):
            if nursery_started is None:
                nursery_started = event.event_date
                location_label = event.nursery_name or "Nursery"
        elif isinstance(event, (DirectSeeded, Transplanted, Moved)):
            if isinstance(event, Transplanted):
                has_transplant = True
            if isinstance(event, Moved):
                moves += 1
            elif planted is None:
                planted = event.event_date
            location_label = bed_label(event) or location_label
        elif isinstance(event, Harvested):
            if not harvested:
                harvested = True
                ended = event.event_date
                if event.qty is not None:
                    harvest_quantity = HarvestQuantity(event.qty, event.quantity_unit)
                if event.weight_grams is not None:
                    harvest_weight = event.weight_grams
        elif isinstance(event, Removed):
            if not harvested and not removed:
                removed = True
                ended = event.event_date
        else:
            raise TypeError(f"Unhandled planting event: {event!r}")

    nursery_days = days_between(planted or now, nursery_started) if nursery_started else 0
    field_days = days_between(ended or now, planted) if planted else 0
    starts = [d for d in (nursery_started, planted) if d is not None]
    total_days = days_between(ended or now, min(starts)) if starts else 0

    if has_transplant:
        basis = planted
        dtm_min, dtm_max = normalize_min_max(maturity.dtm_transplant_min, maturity.dtm_transplant_max)
    else:
        basis = nursery_started or planted
        dtm_min, dtm_max = normalize_min_max(maturity.dtm_direct_seed_min, maturity.dtm_direct_seed_max)

    projected_start = projected_end = None
    if dtm_min > 0 and basis is not None:
        projected_start = add_days_utc(basis, dtm_min)
        projected_end = add_days_utc(basis, dtm_max)

    if harvested:
        status = STATUS_HARVESTED
    elif removed:
        status = STATUS_REMOVED
    elif planted is not None:
        status = STATUS_PLANTED
    elif nursery_started is not None:
        status = STATUS_NURSERY
    else:
        status = None

    return PlantingSummary(
        nursery_started_date=nursery_started,
        planted_date=planted,
        ended_date=ended,
        projected_harvest_start=projected_start,
        projected_harvest_end=projected_end,
        nursery_days=nursery_days,
        field_days=field_days,
        total_days=total_days,
        current_location_label=location_label,
        moves_count=moves,
        harvest_quantity=harvest_quantity,
        harvest_weight_grams=harvest_weight,
        propagation_method=propagation_method,
        initial_quantity=initial_quantity,
        status=status,
    )
