"""Seed or clear a small demo farm.

    python manage_mock_data.py --action insert
    python manage_mock_data.py --action clear

The demo covers every lifecycle path: a nursery start transplanted and
harvested by weight, a direct-seeded bed harvested by count, a planting
that was moved and is still growing, and a planting removed without a
harvest, plus deliveries in mixed units.
"""

import argparse
import traceback
from datetime import date, timedelta

from db import db
from models import (
    Location, Plot, Bed, Nursery, Crop, CropVariety, Planting, PlantingEvent,
    Customer, Delivery, DeliveryItem,
)

# Tables the demo writes to, children first so deletes respect foreign keys.
DEMO_TABLES = [
    DeliveryItem, Delivery, Customer, PlantingEvent, Planting,
    CropVariety, Crop, Nursery, Bed, Plot, Location,
]


def _event(planting, event_type, on, **kwargs):
    event = PlantingEvent(planting=planting, event_type=event_type, event_date=on, **kwargs)
    db.session.add(event)
    return event


def insert_mock_data(today=None):
    """Adds the demo farm in the current app context and commits.

    Returns a dict of the created ids keyed by role, for callers and tests.
    """
    today = today or date.today()
    try:
        location = Location(name="Community Garden", city="Growville")
        plot = Plot(location=location, name="North Plot")
        bed_a = Bed(plot=plot, name="Bed A1", length_inches=96, width_inches=48)
        bed_b = Bed(plot=plot, name="Bed A2", length_inches=96, width_inches=48)
        nursery = Nursery(location=location, name="Propagation House")

        tomato = Crop(name="Tomato", crop_type="Vegetable")
        roma = CropVariety(crop=tomato, name="Roma", latin_name="Solanum lycopersicum", is_organic=True,
                           dtm_transplant_min=50, dtm_transplant_max=65,
                           dtm_direct_seed_min=75, dtm_direct_seed_max=90)
        lettuce = Crop(name="Lettuce", crop_type="Vegetable")
        buttercrunch = CropVariety(crop=lettuce, name="Buttercrunch", latin_name="Lactuca sativa",
                                   dtm_direct_seed_min=45, dtm_direct_seed_max=55)
        db.session.add_all([location, plot, bed_a, bed_b, nursery, tomato, roma, lettuce, buttercrunch])

        # Tomato: nursery -> transplant -> harvest by weight
        tomatoes = Planting(crop_variety=roma, propagation_method="Transplant", qty_initial=24,
                            status="harvested", bed=bed_a)
        start = today - timedelta(days=110)
        _event(tomatoes, "nursery_seeded", start, nursery=nursery, qty=24)
        _event(tomatoes, "transplanted", start + timedelta(days=21), bed=bed_a)
        _event(tomatoes, "harvested", start + timedelta(days=95), bed=bed_a,
               weight_grams=5000, quantity_unit="g")

        # Lettuce: direct seed -> harvest by count
        lettuce_a = Planting(crop_variety=buttercrunch, propagation_method="Direct Seed", qty_initial=40,
                             status="harvested", bed=bed_b)
        _event(lettuce_a, "direct_seeded", today - timedelta(days=60), bed=bed_b, qty=40)
        _event(lettuce_a, "harvested", today - timedelta(days=8), bed=bed_b, qty=36, quantity_unit="count")

        # Lettuce: direct seed -> moved, still growing
        lettuce_b = Planting(crop_variety=buttercrunch, propagation_method="Direct Seed", qty_initial=30,
                             status="planted", bed=bed_a)
        _event(lettuce_b, "direct_seeded", today - timedelta(days=20), bed=bed_b, qty=30)
        _event(lettuce_b, "moved", today - timedelta(days=10), bed=bed_a)

        # Tomato: nursery start that failed and was removed
        failed = Planting(crop_variety=roma, propagation_method="Transplant", qty_initial=12,
                          status="removed", nursery=nursery)
        _event(failed, "nursery_seeded", today - timedelta(days=30), nursery=nursery, qty=12)
        _event(failed, "removed", today - timedelta(days=5), nursery=nursery)

        customer = Customer(name="Growville Co-op", email="orders@growville.example")
        delivery = Delivery(customer=customer, delivery_date=today - timedelta(days=3), status="delivered")
        db.session.add_all([tomatoes, lettuce_a, lettuce_b, failed, customer, delivery])
        db.session.flush()

        db.session.add_all([
            DeliveryItem(delivery=delivery, crop_variety_id=roma.id, qty=2, unit="lb", price_per=4.5, total_price=9.0),
            DeliveryItem(delivery=delivery, crop_variety_id=buttercrunch.id, qty=24, unit="count", price_per=2.0, total_price=48.0),
        ])
        db.session.commit()
        print(f"Inserted demo farm: varieties {roma.id} (Roma), {buttercrunch.id} (Buttercrunch).")
        return {
            "location": location.id,
            "varieties": {"roma": roma.id, "buttercrunch": buttercrunch.id},
            "plantings": {
                "tomatoes": tomatoes.id,
                "lettuce_harvested": lettuce_a.id,
                "lettuce_growing": lettuce_b.id,
                "removed": failed.id,
            },
            "delivery": delivery.id,
        }
    except Exception as e:
        db.session.rollback()
        print(f"Error inserting mock data: {e}")
        traceback.print_exc()
        raise


def clear_mock_data():
    """Deletes every row from the demo tables. Returns the number of rows removed."""
    removed = 0
    try:
        for model in DEMO_TABLES:
            removed += db.session.query(model).delete(synchronize_session=False)
        db.session.commit()
        print(f"Cleared {removed} row(s).")
        return removed
    except Exception as e:
        db.session.rollback()
        print(f"Error clearing mock data: {e}")
        traceback.print_exc()
        raise


# --- Script Execution ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Insert or clear the demo farm data.")
    parser.add_argument(
        '--action',
        type=str,
        choices=['insert', 'clear'],
        required=True,
        help="'insert' adds the demo farm, 'clear' deletes all farm ledger rows."
    )
    parser.add_argument(
        '--create-tables',
        action='store_true',
        help="Create missing tables before inserting (for a fresh SQLite database)."
    )
    args = parser.parse_args()

    from app import app

    with app.app_context():
        if args.create_tables:
            db.create_all()
        if args.action == 'insert':
            insert_mock_data()
        else:
            clear_mock_data()
