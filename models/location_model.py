from db import db


class Location(db.Model):
    """A farm site. Plots and nurseries belong to a location."""
    __tablename__ = 'locations'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String, nullable=False)
    street = db.Column(db.String, nullable=True)
    city = db.Column(db.String, nullable=True)
    state = db.Column(db.String, nullable=True)
    zip = db.Column(db.String, nullable=True)
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    timezone = db.Column(db.String, nullable=True)
    notes = db.Column(db.String, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    # --- Relationships ---
    plots = db.relationship("Plot", back_populates="location", lazy=True, cascade="all, delete-orphan")
    nurseries = db.relationship("Nursery", back_populates="location", lazy=True, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Location(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "state": self.state,
            "timezone": self.timezone,
        }


class Plot(db.Model):
    """A growing area at a location, divided into beds."""
    __tablename__ = 'plots'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id", ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    location = db.relationship("Location", back_populates="plots", lazy=True)
    beds = db.relationship("Bed", back_populates="plot", lazy=True, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Plot(id={self.id}, name='{self.name}', location_id={self.location_id})>"


class Bed(db.Model):
    """A single bed inside a plot."""
    __tablename__ = 'beds'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    plot_id = db.Column(db.Integer, db.ForeignKey("plots.id", ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=True)
    length_inches = db.Column(db.Integer, nullable=True)
    width_inches = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    plot = db.relationship("Plot", back_populates="beds", lazy=True)

    @property
    def location_name(self):
        """Name of the location the bed's plot sits in, if known."""
        if self.plot and self.plot.location:
            return self.plot.location.name
        return None

    def __repr__(self):
        return f"<Bed(id={self.id}, plot_id={self.plot_id})>"
