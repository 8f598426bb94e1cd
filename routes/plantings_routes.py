from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from db import db
from functions import check_api_key, parse_as_of
from ledger import summarize_planting, format_event_type, format_planting_status
from models.planting_model import Planting
from models.planting_event_model import PlantingEvent
from models.crop_variety_model import CropVariety

plantings_api = Blueprint("plantings_api", __name__)


def load_planting_events(planting_id):
    """Events for one planting, oldest first; same-day events in insertion order."""
    return PlantingEvent.query.filter(PlantingEvent.planting_id == planting_id)\
                              .options(db.joinedload(PlantingEvent.bed), db.joinedload(PlantingEvent.nursery))\
                              .order_by(PlantingEvent.event_date.asc(), PlantingEvent.id.asc()).all()


def build_planting_summary(planting, events, as_of):
    summary = summarize_planting(
        events,
        maturity=planting.crop_variety,
        propagation_method=planting.propagation_method,
        initial_quantity=planting.qty_initial,
        now=as_of,
    )
    result = summary.to_dict()
    result["status_label"] = format_planting_status(summary.status) if summary.status else None
    return result


# --- API Routes ---

@plantings_api.get("/plantings")
def get_all_plantings():
    """
    Lists plantings with their derived lifecycle summaries.
    Optional filters: crop_variety_id. Optional as_of (YYYY-MM-DD) replaces
    today as the reference date for open-ended durations.
    """
    api_key_error = check_api_key(request)
    if api_key_error: return api_key_error

    variety_filter = request.args.get("crop_variety_id")
    try:
        as_of = parse_as_of(request.args.get("as_of"))
        variety_id = int(variety_filter) if variety_filter else None
    except ValueError:
        current_app.logger.warning(f"GET /plantings rejected invalid parameters: crop_variety_id={variety_filter!r}, as_of={request.args.get('as_of')!r}")
        return jsonify(error={"message": "Invalid parameters. crop_variety_id must be an integer and as_of a YYYY-MM-DD date."}), 400

    try:
        query = Planting.query.options(db.joinedload(Planting.crop_variety).joinedload(CropVariety.crop))
        if variety_id is not None:
            query = query.filter(Planting.crop_variety_id == variety_id)
        plantings = query.order_by(Planting.created_at.desc(), Planting.id.desc()).all()

        result_list = []
        for planting in plantings:
            entry = planting.to_dict()
            entry["summary"] = build_planting_summary(planting, load_planting_events(planting.id), as_of)
            result_list.append(entry)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error during GET /plantings: {e}", exc_info=True)
        return jsonify(error={"message": str(e)}), 500

    count = len(result_list)
    current_app.logger.info(f"GET /plantings request successful. Filter: variety={variety_id}. Count: {count}")
    return jsonify(count=count, plantings=result_list), 200


@plantings_api.get("/plantings/<int:planting_id>/summary")
def get_planting_summary(planting_id):
    """
    Derived lifecycle summary for one planting: key dates, durations,
    projected harvest window, current location and harvest metrics.
    """
    api_key_error = check_api_key(request)
    if api_key_error: return api_key_error

    try:
        as_of = parse_as_of(request.args.get("as_of"))
    except ValueError:
        current_app.logger.warning(f"Summary for planting {planting_id} rejected invalid as_of: {request.args.get('as_of')!r}")
        return jsonify(error={"message": "Invalid as_of date format. Use YYYY-MM-DD."}), 400

    try:
        planting = db.session.get(Planting, planting_id)
        if not planting:
            return jsonify(message=f"Planting with ID {planting_id} not found."), 404
        summary = build_planting_summary(planting, load_planting_events(planting_id), as_of)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error fetching summary for planting {planting_id}: {e}", exc_info=True)
        return jsonify(error={"message": str(e)}), 500

    current_app.logger.info(f"Computed summary for planting {planting_id} as of {as_of.isoformat()}.")
    return jsonify(planting_id=planting_id, as_of=as_of.isoformat(), summary=summary), 200


@plantings_api.get("/plantings/<int:planting_id>/events")
def get_planting_events(planting_id):
    """Event history for one planting, newest first, with display labels."""
    api_key_error = check_api_key(request)
    if api_key_error: return api_key_error

    try:
        planting = db.session.get(Planting, planting_id)
        if not planting:
            return jsonify(message=f"Planting with ID {planting_id} not found."), 404
        events = load_planting_events(planting_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error fetching events for planting {planting_id}: {e}", exc_info=True)
        return jsonify(error={"message": str(e)}), 500

    result_list = []
    for event in reversed(events):
        entry = event.to_dict()
        entry["label"] = format_event_type(event.event_type)
        result_list.append(entry)
    return jsonify(planting_id=planting_id, count=len(result_list), events=result_list), 200
