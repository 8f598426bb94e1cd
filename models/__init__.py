"""Flask-SQLAlchemy models.

Importing the package registers every table on ``db.metadata`` so string
relationship targets resolve and ``db.create_all()`` sees the full schema.
"""

from models.location_model import Location, Plot, Bed
from models.nursery_model import Nursery
from models.crop_variety_model import Crop, CropVariety
from models.planting_model import Planting
from models.planting_event_model import PlantingEvent
from models.customer_model import Customer
from models.delivery_model import Delivery, DeliveryItem
