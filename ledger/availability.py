"""Harvest-vs-delivery availability per crop variety.

Harvested events are attributed to a variety through their planting.
Counts and grams are two independent ledgers sharing the variety key;
nothing is ever converted between them. Weight-unit deliveries are
converted to grams, every other delivery line is taken as a count.
Negative availability (delivered more than was recorded harvested) is
reported as is.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from .units import is_weight_unit, to_grams


@dataclass(frozen=True)
class VarietyAvailability:
    crop_variety_id: int
    count_available: float = 0
    grams_available: float = 0

    def to_dict(self):
        return {
            "crop_variety_id": self.crop_variety_id,
            "count_available": self.count_available,
            "grams_available": self.grams_available,
        }


@dataclass(frozen=True)
class Shortfall:
    crop_variety_id: int
    axis: str  # "count" or "grams"
    requested: float
    available: float

    def to_dict(self):
        return {
            "crop_variety_id": self.crop_variety_id,
            "axis": self.axis,
            "requested": self.requested,
            "available": self.available,
        }


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _number(value):
    """Numeric value of a column, or None for anything that is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (int, float)):
        return value
    return None


def _planting_pair(row):
    if isinstance(row, (tuple, list)):
        return row[0], row[1]
    return _field(row, "id"), _field(row, "crop_variety_id")


def reconcile_availability(variety_ids, plantings, harvest_events, delivery_items):
    """Net harvested totals against delivered totals per variety.

    Args:
        variety_ids: varieties to report on, in output order.
        plantings: ``(planting_id, crop_variety_id)`` pairs, or rows with
            ``id`` and ``crop_variety_id``.
        harvest_events: harvested-type event rows (``planting_id``, ``qty``,
            ``weight_grams``).
        delivery_items: delivery rows (``crop_variety_id``, ``qty``, ``unit``).

    Returns:
        list of ``VarietyAvailability``, one per requested id.
    """
    variety_ids = list(variety_ids or [])
    if not variety_ids:
        return []

    planting_to_variety = {}
    for row in plantings or []:
        planting_id, variety_id = _planting_pair(row)
        if planting_id is not None and variety_id is not None:
            planting_to_variety[planting_id] = variety_id

    harvested_count = defaultdict(int)
    harvested_grams = defaultdict(int)
    for event in harvest_events or []:
        variety_id = planting_to_variety.get(_field(event, "planting_id"))
        if variety_id is None:
            continue
        harvested_count[variety_id] += _number(_field(event, "qty")) or 0
        harvested_grams[variety_id] += _number(_field(event, "weight_grams")) or 0

    delivered_count, delivered_grams = delivery_totals(delivery_items)

    return [
        VarietyAvailability(
            crop_variety_id=variety_id,
            count_available=harvested_count.get(variety_id, 0) - delivered_count.get(variety_id, 0),
            grams_available=harvested_grams.get(variety_id, 0) - delivered_grams.get(variety_id, 0),
        )
        for variety_id in variety_ids
    ]


def delivery_totals(items):
    """Sum delivery lines per variety into (counts, grams) dicts."""
    counts = defaultdict(int)
    grams = defaultdict(int)
    for item in items or []:
        variety_id = _field(item, "crop_variety_id")
        qty = _number(_field(item, "qty"))
        if variety_id is None or qty is None:
            continue
        unit = _field(item, "unit")
        if is_weight_unit(unit):
            grams[variety_id] += to_grams(qty, unit)
        else:
            counts[variety_id] += qty
    return dict(counts), dict(grams)


def find_shortfalls(availability, requested_items):
    """Compare proposed delivery lines with what is available.

    Returns a ``Shortfall`` for every variety/axis where the request is
    larger than the available amount. Whether a shortfall blocks anything
    is up to the caller.
    """
    by_variety = {a.crop_variety_id: a for a in availability or []}
    counts, grams = delivery_totals(requested_items)

    shortfalls = []
    for variety_id, requested in counts.items():
        entry = by_variety.get(variety_id)
        available = entry.count_available if entry else 0
        if requested > available:
            shortfalls.append(Shortfall(variety_id, "count", requested, available))
    for variety_id, requested in grams.items():
        entry = by_variety.get(variety_id)
        available = entry.grams_available if entry else 0
        if requested > available:
            shortfalls.append(Shortfall(variety_id, "grams", requested, available))
    return shortfalls
