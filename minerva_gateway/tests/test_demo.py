import pytest

from minerva_gateway.services.demo import DemoDataset, is_demo


def test_is_demo():
    assert is_demo("demo", "demo") is True
    assert is_demo("demo", "wrong") is False
    assert is_demo("DEMO", "demo") is False
    assert is_demo(None, None) is False


def test_dataset_returns_copies():
    ds = DemoDataset()
    first = ds.get_transcript()
    first[0]["grade"] = "F"
    assert ds.get_transcript()[0]["grade"] == "A"


@pytest.mark.asyncio
async def test_demo_login_skips_portal(client, fake_portal):
    r = await client.post("/api/auth/login", json={"username": "demo", "password": "demo"})
    assert r.status_code == 200
    assert fake_portal.calls == []


@pytest.mark.asyncio
async def test_demo_token_serves_canned_data(client, fake_portal, demo_headers):
    r = await client.get("/api/transcript", headers=demo_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["cumGPA"] == "3.50"
    assert body["totalCredits"] == 12

    r = await client.get(
        "/api/courses", headers=demo_headers, params={"dep": "comp", "number": "202", "season": "f", "year": "2024"}
    )
    assert [c["crn"] for c in r.json()] == ["1234", "1235"]

    r = await client.post("/api/courses/add", headers=demo_headers, json={"season": "f", "year": "2024", "crn": "1234"})
    assert r.json() == {"success": True, "result": {"demo": True, "season": "f", "year": "2024", "added": ["1234"]}}

    r = await client.post("/api/schedule", headers=demo_headers, json={"season": "f", "year": "2024"})
    assert len(r.json()) == 2

    r = await client.get("/api/user", headers=demo_headers)
    assert r.json()["name"] == "Demo Student"

    assert fake_portal.calls == []


@pytest.mark.asyncio
async def test_demo_credentials_in_body_trigger_fallback(client, fake_portal, user_headers):
    r = await client.post(
        "/api/courses/registered",
        headers=user_headers,
        json={"season": "f", "year": "2024", "username": "demo", "password": "demo"},
    )
    assert r.status_code == 200
    assert r.json()[0]["location"] == "TROTTIER 1100"
    assert fake_portal.calls == []


@pytest.mark.asyncio
async def test_demo_still_validates(client, demo_headers):
    r = await client.post("/api/courses/drop", headers=demo_headers, json={"season": "fall", "year": "2024", "crn": "1"})
    assert r.status_code == 400


def test_datasets_do_not_share_records():
    a, b = DemoDataset(), DemoDataset()
    assert a.course_detail is not b.course_detail
    assert a.transcript[0] is not b.transcript[0]

    a.course_detail["title"] = "changed"
    a.registered[0]["location"] = "changed"
    assert b.view_course(crn=["2345"])["title"] == "Introduction to Software Systems"
    assert b.get_registered_courses()[0]["location"] == "TROTTIER 1100"
    assert DemoDataset().course_detail["title"] == "Introduction to Software Systems"
