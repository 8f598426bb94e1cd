from db import db


class Crop(db.Model):
    __tablename__ = 'crops'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String, nullable=False)
    crop_type = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    varieties = db.relationship("CropVariety", back_populates="crop", lazy=True, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Crop(id={self.id}, name='{self.name}')>"


class CropVariety(db.Model):
    """A named cultivar with its days-to-maturity ranges."""
    __tablename__ = 'crop_varieties'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    crop_id = db.Column(db.Integer, db.ForeignKey("crops.id", ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    latin_name = db.Column(db.String, nullable=True)
    is_organic = db.Column(db.Boolean, nullable=False, default=False)
    # Days to maturity, split by propagation method. Any may be unset.
    dtm_direct_seed_min = db.Column(db.Integer, nullable=True)
    dtm_direct_seed_max = db.Column(db.Integer, nullable=True)
    dtm_transplant_min = db.Column(db.Integer, nullable=True)
    dtm_transplant_max = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    crop = db.relationship("Crop", back_populates="varieties", lazy=True)
    plantings = db.relationship("Planting", back_populates="crop_variety", lazy=True)

    @property
    def label(self):
        """'Crop - Variety' display label, falling back to the variety name."""
        crop_name = self.crop.name if self.crop else None
        if crop_name:
            return f"{crop_name} - {self.name}"
        return self.name or f"Variety #{self.id}"

    def __repr__(self):
        return f"<CropVariety(id={self.id}, name='{self.name}', crop_id={self.crop_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "crop_id": self.crop_id,
            "name": self.name,
            "label": self.label,
            "latin_name": self.latin_name,
            "dtm_direct_seed_min": self.dtm_direct_seed_min,
            "dtm_direct_seed_max": self.dtm_direct_seed_max,
            "dtm_transplant_min": self.dtm_transplant_min,
            "dtm_transplant_max": self.dtm_transplant_max,
        }
