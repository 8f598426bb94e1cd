import logging
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from db import db
from models import (
    Location, Plot, Bed, Nursery, Crop, CropVariety, Planting, PlantingEvent,
    Delivery, DeliveryItem,
)


@pytest.fixture
def farm(app):
    location = Location(name="Home Farm")
    plot = Plot(location=location, name="P1")
    bed = Bed(plot=plot, name="B1")
    nursery = Nursery(location=location, name="Seed House")
    crop = Crop(name="Tomato")
    variety_x = CropVariety(crop=crop, name="Roma", dtm_transplant_min=50, dtm_transplant_max=65)
    variety_y = CropVariety(crop=crop, name="Cherry")
    db.session.add_all([location, plot, bed, nursery, crop, variety_x, variety_y])

    p1 = Planting(crop_variety=variety_x, propagation_method="Transplant", qty_initial=10, status="harvested")
    p2 = Planting(crop_variety=variety_x, propagation_method="Direct Seed", qty_initial=5, status="harvested")
    p3 = Planting(crop_variety=variety_y, propagation_method="Direct Seed", qty_initial=8, status="harvested")
    db.session.add_all([p1, p2, p3])

    db.session.add_all([
        PlantingEvent(planting=p1, event_type="nursery_seeded", event_date=date(2023, 12, 12), nursery=nursery),
        PlantingEvent(planting=p1, event_type="transplanted", event_date=date(2024, 1, 1), bed=bed),
        PlantingEvent(planting=p1, event_type="harvested", event_date=date(2024, 3, 1), bed=bed, qty=10),
        PlantingEvent(planting=p2, event_type="direct_seeded", event_date=date(2024, 1, 5), bed=bed),
        PlantingEvent(planting=p2, event_type="harvested", event_date=date(2024, 3, 5), bed=bed, qty=5),
        PlantingEvent(planting=p3, event_type="direct_seeded", event_date=date(2024, 1, 5), bed=bed),
        PlantingEvent(planting=p3, event_type="harvested", event_date=date(2024, 3, 5), bed=bed, weight_grams=5000),
    ])
    delivery = Delivery(delivery_date=date(2024, 3, 10))
    db.session.add(delivery)
    db.session.flush()
    db.session.add_all([
        DeliveryItem(delivery=delivery, crop_variety_id=variety_x.id, qty=12, unit="count"),
        DeliveryItem(delivery=delivery, crop_variety_id=variety_y.id, qty=2, unit="lb"),
    ])
    db.session.commit()
    return {"x": variety_x.id, "y": variety_y.id, "p1": p1.id, "p2": p2.id, "bed": bed.id}


def test_availability_nets_per_variety_in_query_order(client, farm):
    response = client.get(f"/inventory/availability?ids={farm['y']},{farm['x']}")
    assert response.status_code == 200
    availability = response.get_json()["availability"]
    assert [a["crop_variety_id"] for a in availability] == [farm["y"], farm["x"]]
    y, x = availability
    assert x["count_available"] == 3
    assert x["grams_available"] == 0
    assert y["count_available"] == 0
    assert y["grams_available"] == pytest.approx(4092.81526)


def test_availability_drops_unparsable_ids(client, farm):
    response = client.get(f"/inventory/availability?ids=abc, {farm['x']} ,,1.5")
    assert response.status_code == 200
    assert [a["crop_variety_id"] for a in response.get_json()["availability"]] == [farm["x"]]


def test_availability_with_no_ids_skips_database(client, app, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("database should not be queried")

    monkeypatch.setattr(db.session, "query", fail)
    for url in ("/inventory/availability", "/inventory/availability?ids=", "/inventory/availability?ids=x,y"):
        response = client.get(url)
        assert response.status_code == 200
        assert response.get_json() == {"availability": []}


def test_availability_fetch_failure_is_single_error(client, app, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db.session, "query", broken)
    response = client.get("/inventory/availability?ids=1,2")
    assert response.status_code == 500
    body = response.get_json()
    assert "availability" not in body
    assert "connection lost" in body["error"]["message"]


def test_availability_check_reports_shortfalls(client, farm):
    response = client.post("/inventory/availability/check", json={"items": [
        {"crop_variety_id": farm["x"], "qty": 5, "unit": "count"},
        {"crop_variety_id": farm["y"], "qty": 1, "unit": "kg"},
        {"crop_variety_id": "bad", "qty": 1, "unit": "count"},
    ]})
    assert response.status_code == 200
    body = response.get_json()
    assert {(s["crop_variety_id"], s["axis"]) for s in body["shortfalls"]} == {(farm["x"], "count")}
    assert len(body["availability"]) == 2


def test_availability_check_requires_items_list(client):
    response = client.post("/inventory/availability/check", json={"lines": []})
    assert response.status_code == 400


def test_planting_summary(client, farm):
    response = client.get(f"/plantings/{farm['p1']}/summary?as_of=2024-06-01")
    assert response.status_code == 200
    body = response.get_json()
    assert body["as_of"] == "2024-06-01"
    summary = body["summary"]
    assert summary["nursery_started_date"] == "2023-12-12"
    assert summary["planted_date"] == "2024-01-01"
    assert summary["ended_date"] == "2024-03-01"
    assert summary["projected_harvest_start"] == "2024-02-20"
    assert summary["projected_harvest_end"] == "2024-03-06"
    assert summary["nursery_days"] == 20
    assert summary["field_days"] == 60
    assert summary["total_days"] == 80
    assert summary["current_location_label"] == f"Bed #{farm['bed']} @ Home Farm"
    assert summary["harvest_quantity"] == {"qty": 10, "unit": None}
    assert summary["propagation_method"] == "Transplant"
    assert summary["initial_quantity"] == 10
    assert summary["status"] == "harvested"
    assert summary["status_label"] == "Harvested"


def test_planting_summary_is_repeatable(client, farm):
    url = f"/plantings/{farm['p2']}/summary?as_of=2024-06-01"
    assert client.get(url).data == client.get(url).data


def test_planting_summary_errors(client, farm):
    assert client.get("/plantings/9999/summary").status_code == 404
    assert client.get(f"/plantings/{farm['p1']}/summary?as_of=June").status_code == 400


def test_planting_events_newest_first_with_labels(client, farm):
    response = client.get(f"/plantings/{farm['p1']}/events")
    assert response.status_code == 200
    events = response.get_json()["events"]
    assert [e["event_type"] for e in events] == ["harvested", "transplanted", "nursery_seeded"]
    assert [e["label"] for e in events] == ["Harvest", "Transplanted", "Nursery sown"]
    assert events[2]["nursery_name"] == "Seed House"


def test_list_plantings_filters_by_variety(client, farm):
    response = client.get(f"/plantings?crop_variety_id={farm['x']}&as_of=2024-06-01")
    assert response.status_code == 200
    body = response.get_json()
    assert body["count"] == 2
    assert {p["id"] for p in body["plantings"]} == {farm["p1"], farm["p2"]}
    assert all("summary" in p for p in body["plantings"])
    assert client.get("/plantings?crop_variety_id=abc").status_code == 400


def test_api_key_enforced_when_configured(client, app, farm):
    app.config["API_KEY"] = "secret"
    assert client.get(f"/inventory/availability?ids={farm['x']}").status_code == 403
    response = client.get(f"/inventory/availability?ids={farm['x']}", headers={"x-api-key": "secret"})
    assert response.status_code == 200


def test_rejected_parameters_are_logged_as_warnings(client, farm, caplog):
    with caplog.at_level(logging.WARNING):
        assert client.get(f"/plantings/{farm['p1']}/summary?as_of=June").status_code == 400
        assert client.get("/plantings?crop_variety_id=abc").status_code == 400
        assert client.post("/inventory/availability/check", json={"lines": []}).status_code == 400
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 3
    assert "'June'" in warnings[0].getMessage()
