from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from db import db
from functions import check_api_key, parse_id_list
from ledger import reconcile_availability, find_shortfalls
from models.planting_model import Planting
from models.planting_event_model import PlantingEvent
from models.delivery_model import DeliveryItem

inventory_api = Blueprint("inventory_api", __name__)


def fetch_availability(variety_ids):
    """Reads plantings, harvest events and delivery items for the given
    varieties in one session and nets them per variety.

    All three reads run inside the request's single transaction so harvest
    and delivery figures come from the same point in time. Database errors
    propagate to the caller.
    """
    if not variety_ids:
        return []

    planting_rows = db.session.query(Planting.id, Planting.crop_variety_id)\
                              .filter(Planting.crop_variety_id.in_(variety_ids)).all()
    plantings = [(planting_id, variety_id) for planting_id, variety_id in planting_rows]
    planting_ids = [planting_id for planting_id, _ in plantings]

    harvest_events = []
    if planting_ids:
        harvest_events = db.session.query(
            PlantingEvent.planting_id,
            PlantingEvent.qty,
            PlantingEvent.weight_grams
        ).filter(
            PlantingEvent.event_type == "harvested",
            PlantingEvent.planting_id.in_(planting_ids)
        ).all()
        harvest_events = [row._asdict() for row in harvest_events]

    delivery_items = db.session.query(
        DeliveryItem.crop_variety_id,
        DeliveryItem.qty,
        DeliveryItem.unit
    ).filter(DeliveryItem.crop_variety_id.in_(variety_ids)).all()
    delivery_items = [row._asdict() for row in delivery_items]

    return reconcile_availability(variety_ids, plantings, harvest_events, delivery_items)


# --- API Routes ---

@inventory_api.get("/inventory/availability")
def get_availability():
    """
    Harvested minus delivered quantity per crop variety.
    Query param 'ids' is a comma-separated list of crop variety ids; entries
    that are not integers are dropped. Counts and grams are reported
    separately and may be negative.
    """
    api_key_error = check_api_key(request)
    if api_key_error: return api_key_error

    variety_ids = parse_id_list(request.args.get("ids"))
    if not variety_ids:
        return jsonify(availability=[]), 200

    try:
        availability = fetch_availability(variety_ids)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error during GET /inventory/availability (ids={variety_ids}): {e}", exc_info=True)
        return jsonify(error={"message": str(e)}), 500

    current_app.logger.info(f"GET /inventory/availability successful. Varieties: {len(variety_ids)}")
    return jsonify(availability=[a.to_dict() for a in availability]), 200


@inventory_api.post("/inventory/availability/check")
def check_delivery_availability():
    """
    Compares proposed delivery lines against current availability.
    Body: {"items": [{"crop_variety_id": 1, "qty": 3, "unit": "lb"}, ...]}
    Lines without a numeric variety id or qty are ignored. Shortfalls are
    reported, not enforced.
    """
    api_key_error = check_api_key(request)
    if api_key_error: return api_key_error

    payload = request.get_json(silent=True) or {}
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        current_app.logger.warning("POST /inventory/availability/check rejected: body has no 'items' list.")
        return jsonify(error={"message": "Request body must be a JSON object with an 'items' list."}), 400

    lines = []
    variety_ids = []
    for item in items:
        if not isinstance(item, dict):
            continue
        variety_id = item.get("crop_variety_id")
        if not isinstance(variety_id, int) or isinstance(variety_id, bool):
            continue
        lines.append(item)
        if variety_id not in variety_ids:
            variety_ids.append(variety_id)
    if not variety_ids:
        return jsonify(availability=[], shortfalls=[]), 200

    try:
        availability = fetch_availability(variety_ids)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error during POST /inventory/availability/check: {e}", exc_info=True)
        return jsonify(error={"message": str(e)}), 500

    shortfalls = find_shortfalls(availability, lines)
    if shortfalls:
        current_app.logger.info(f"Availability check found {len(shortfalls)} shortfall(s) for varieties {variety_ids}.")
    return jsonify(
        availability=[a.to_dict() for a in availability],
        shortfalls=[s.to_dict() for s in shortfalls]
    ), 200
