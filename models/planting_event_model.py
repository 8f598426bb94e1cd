from datetime import datetime

import pytz
from db import db

PLANTING_EVENT_TYPES = ['nursery_seeded', 'direct_seeded', 'transplanted', 'moved', 'harvested', 'removed']


class PlantingEvent(db.Model):
    """Append-only lifecycle fact for a planting. Never updated once written."""
    __tablename__ = 'planting_events'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    planting_id = db.Column(db.Integer, db.ForeignKey("plantings.id", ondelete='CASCADE'), nullable=False, index=True)
    event_type = db.Column(db.String(20), nullable=False)
    event_date = db.Column(db.Date, nullable=False)
    bed_id = db.Column(db.Integer, db.ForeignKey("beds.id"), nullable=True)
    nursery_id = db.Column(db.Integer, db.ForeignKey("nurseries.id"), nullable=True)

    # Harvest metrics
    qty = db.Column(db.Float, nullable=True)
    weight_grams = db.Column(db.Float, nullable=True)
    quantity_unit = db.Column(db.String, nullable=True)

    payload = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))

    # --- Relationships ---
    planting = db.relationship("Planting", back_populates="events", lazy=True)
    bed = db.relationship("Bed", lazy=True)
    nursery = db.relationship("Nursery", lazy=True)

    # --- Constraints ---
    __table_args__ = (
        db.CheckConstraint(event_type.in_(PLANTING_EVENT_TYPES), name="valid_planting_event_type"),
        db.CheckConstraint("qty IS NULL OR qty >= 0", name="check_event_qty_non_negative"),
        db.CheckConstraint("weight_grams IS NULL OR weight_grams >= 0", name="check_event_weight_non_negative"),
        db.Index("planting_events_type_date_idx", "event_type", "event_date"),
    )

    @property
    def location_name(self):
        return self.bed.location_name if self.bed else None

    @property
    def nursery_name(self):
        return self.nursery.name if self.nursery else None

    def __repr__(self):
        return (f"<PlantingEvent(id={self.id}, planting={self.planting_id}, "
                f"type='{self.event_type}', date={self.event_date})>")

    def to_dict(self):
        return {
            "id": self.id,
            "planting_id": self.planting_id,
            "event_type": self.event_type,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "bed_id": self.bed_id,
            "nursery_id": self.nursery_id,
            "location_name": self.location_name,
            "nursery_name": self.nursery_name,
            "qty": self.qty,
            "weight_grams": self.weight_grams,
            "quantity_unit": self.quantity_unit,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
