from datetime import datetime

import pytz
from db import db


class Delivery(db.Model):
    """A delivery to a customer, made up of one or more delivery items."""
    __tablename__ = 'deliveries'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id", ondelete='SET NULL'), nullable=True)
    delivery_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String, nullable=True)
    payment_terms = db.Column(db.String, nullable=True)
    payment_status = db.Column(db.String, nullable=True)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))

    customer = db.relationship("Customer", back_populates="deliveries", lazy=True)
    items = db.relationship("DeliveryItem", back_populates="delivery", lazy=True, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Delivery(id={self.id}, customer={self.customer_id}, date={self.delivery_date})>"


class DeliveryItem(db.Model):
    """One delivered line. Not tied to a planting; netted per crop variety."""
    __tablename__ = 'delivery_items'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    delivery_id = db.Column(db.Integer, db.ForeignKey("deliveries.id", ondelete='CASCADE'), nullable=False)
    crop_variety_id = db.Column(db.Integer, db.ForeignKey("crop_varieties.id"), nullable=True, index=True)
    planting_id = db.Column(db.Integer, db.ForeignKey("plantings.id", ondelete='SET NULL'), nullable=True)
    qty = db.Column(db.Float, nullable=True)
    unit = db.Column(db.String, nullable=True)  # free-form: "count", "lb", "kg", ...
    price_per = db.Column(db.Float, nullable=True)
    total_price = db.Column(db.Float, nullable=True)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))

    delivery = db.relationship("Delivery", back_populates="items", lazy=True)

    def __repr__(self):
        return f"<DeliveryItem(id={self.id}, variety={self.crop_variety_id}, qty={self.qty} {self.unit})>"

    def to_dict(self):
        return {
            "id": self.id,
            "delivery_id": self.delivery_id,
            "crop_variety_id": self.crop_variety_id,
            "planting_id": self.planting_id,
            "qty": self.qty,
            "unit": self.unit,
            "price_per": self.price_per,
            "total_price": self.total_price,
        }
