"""Derived planting state.

Pure functions over already-fetched records: unit normalization, the
planting lifecycle summary and harvest-vs-delivery availability::

    from ledger import summarize_planting, reconcile_availability
"""

from .units import normalize_unit, is_weight_unit, is_count_unit, to_grams
from .dates import add_days_utc, days_between, parse_date
from .events import (
    PlantingEvent,
    NurserySeeded,
    DirectSeeded,
    Transplanted,
    Moved,
    Harvested,
    Removed,
    event_from_record,
    events_from_records,
    format_event_type,
    format_planting_status,
)
from .lifecycle import (
    CropVarietyMaturity,
    PlantingSummary,
    normalize_min_max,
    normalize_dtm,
    summarize_planting,
)
from .availability import (
    VarietyAvailability,
    Shortfall,
    reconcile_availability,
    find_shortfalls,
)
