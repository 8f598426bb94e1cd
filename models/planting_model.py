from datetime import datetime

import pytz
from db import db

PROPAGATION_METHODS = ['Direct Seed', 'Transplant']
PLANTING_STATUSES = ['nursery', 'planted', 'harvested', 'removed']


class Planting(db.Model):
    """One sowing of a crop variety, followed through its lifecycle events."""
    __tablename__ = 'plantings'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    crop_variety_id = db.Column(db.Integer, db.ForeignKey("crop_varieties.id"), nullable=False, index=True)
    propagation_method = db.Column(db.String, nullable=False)
    qty_initial = db.Column(db.Integer, nullable=False)
    # Stored pointer state kept by the write side; summaries derive their own.
    status = db.Column(db.String(20), nullable=False, default='nursery', index=True)
    bed_id = db.Column(db.Integer, db.ForeignKey("beds.id"), nullable=True)
    nursery_id = db.Column(db.Integer, db.ForeignKey("nurseries.id"), nullable=True)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))
    updated_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(pytz.utc), onupdate=lambda: datetime.now(pytz.utc))

    # --- Relationships ---
    crop_variety = db.relationship("CropVariety", back_populates="plantings", lazy=True)
    bed = db.relationship("Bed", lazy=True)
    nursery = db.relationship("Nursery", lazy=True)
    events = db.relationship(
        "PlantingEvent",
        back_populates="planting",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="[PlantingEvent.event_date, PlantingEvent.id]",
    )

    # --- Constraints ---
    __table_args__ = (
        db.CheckConstraint("qty_initial > 0", name="check_qty_initial_positive"),
        db.CheckConstraint(status.in_(PLANTING_STATUSES), name="valid_planting_status"),
    )

    def __repr__(self):
        return f"<Planting(id={self.id}, variety={self.crop_variety_id}, status='{self.status}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "crop_variety_id": self.crop_variety_id,
            "crop_variety": self.crop_variety.label if self.crop_variety else None,
            "propagation_method": self.propagation_method,
            "qty_initial": self.qty_initial,
            "status": self.status,
            "bed_id": self.bed_id,
            "nursery_id": self.nursery_id,
            "notes": self.notes,
        }
