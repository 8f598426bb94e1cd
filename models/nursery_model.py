from db import db


class Nursery(db.Model):
    """A seedling-raising area, separate from the field beds."""
    __tablename__ = 'nurseries'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id", ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    location = db.relationship("Location", back_populates="nurseries", lazy=True)

    def __repr__(self):
        return f"<Nursery(id={self.id}, name='{self.name}')>"
