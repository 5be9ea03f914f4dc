from leaselink.models.ticket import Ticket
from leaselink.models.unit import Unit
from tests.fixtures_data import HAPPY_PATH_TICKET_PAYLOAD, build_client, build_session, seed_directory


def _client(role="STAFF"):
    db = build_session()
    seed_directory(db)
    return db, build_client(db, role=role)


def test_crud_routes_require_session():
    db = build_session()
    client = build_client(db)

    for path in ("/api/properties", "/api/units", "/api/tenants"):
        assert client.get(path).status_code == 401


def test_properties_list_and_detail_include_units():
    _, client = _client()

    listing = client.get("/api/properties").json()
    detail = client.get("/api/properties/1")
    missing = client.get("/api/properties/999")

    assert [prop["name"] for prop in listing] == ["Sunset Villas", "Riverwalk Lofts"]
    assert [unit["unitNumber"] for unit in listing[0]["units"]] == ["101"]
    assert detail.status_code == 200
    assert detail.json()["units"][0]["id"] == 5
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Property not found"}


def test_property_create_and_update():
    _, client = _client()

    invalid = client.post("/api/properties", json={"name": "No address"})
    created = client.post("/api/properties", json={"name": " Oak Court ", "address": "9 Oak St", "city": "Austin"})
    prop_id = created.json()["id"]
    renamed = client.put(f"/api/properties/{prop_id}", json={"name": "Oak Court II", "zip": "78701"})
    blanked = client.put(f"/api/properties/{prop_id}", json={"address": "  "})
    missing = client.put("/api/properties/999", json={"name": "Ghost"})

    assert invalid.status_code == 400
    assert created.status_code == 201
    assert created.json()["name"] == "Oak Court"
    assert renamed.json()["name"] == "Oak Court II"
    assert renamed.json()["zip"] == "78701"
    assert renamed.json()["city"] == "Austin"
    assert blanked.status_code == 400
    assert client.get(f"/api/properties/{prop_id}").json()["address"] == "9 Oak St"
    assert missing.status_code == 404


def test_property_delete_cascades_and_is_role_gated():
    db, staff = _client("STAFF")
    staff.post("/api/tickets", json=HAPPY_PATH_TICKET_PAYLOAD)

    forbidden = staff.delete("/api/properties/1")
    manager = build_client(db, role="MANAGER")
    deleted = manager.delete("/api/properties/1")

    assert forbidden.status_code == 403
    assert deleted.status_code == 204
    assert manager.get("/api/properties/1").status_code == 404
    assert db.query(Unit).filter(Unit.property_id == 1).count() == 0
    assert db.query(Ticket).count() == 0


def test_units_create_and_filter():
    _, client = _client()

    created = client.post("/api/units", json={"propertyId": 2, "unitNumber": "202", "beds": 3})
    bad_status = client.post("/api/units", json={"propertyId": 2, "unitNumber": "203", "status": "RENTED"})
    missing_property = client.post("/api/units", json={"propertyId": 999, "unitNumber": "1"})
    missing_fields = client.post("/api/units", json={"unitNumber": "1"})
    filtered = client.get("/api/units", params={"propertyId": 2}).json()

    assert created.status_code == 201
    assert created.json()["status"] == "VACANT"
    assert bad_status.status_code == 400
    assert missing_property.status_code == 404
    assert missing_fields.status_code == 400
    assert [unit["unitNumber"] for unit in filtered] == ["201", "202"]


def test_tenants_create_list_and_detail():
    _, client = _client()

    created = client.post("/api/tenants", json={"name": "Ana Lima", "email": "ana@example.com", "unitId": 6})
    nameless = client.post("/api/tenants", json={"email": "x@example.com"})
    bad_unit = client.post("/api/tenants", json={"name": "Lost", "unitId": 999})
    in_unit = client.get("/api/tenants", params={"unitId": 6}).json()

    assert created.status_code == 201
    assert client.get(f"/api/tenants/{created.json()['id']}").json()["name"] == "Ana Lima"
    assert nameless.status_code == 400
    assert bad_unit.status_code == 404
    assert bad_unit.json() == {"detail": "Unit not found"}
    assert [tenant["name"] for tenant in in_unit] == ["Ana Lima", "Jane Smith"]
    assert client.get("/api/tenants/999").status_code == 404
