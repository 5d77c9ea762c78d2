import pytest

from conftest import auth_header, make_company, make_job, make_user, past

COMPANY_BODY = {
    "name": "Initech",
    "description": "Enterprise software",
    "industry": "Software",
    "location": "Austin",
    "employee_count": "51-200",
}


@pytest.fixture
def recruiter(db):
    return make_user(db, "recruiter")


def test_create_company(client, db, recruiter):
    resp = client.post("/api/companies", json=COMPANY_BODY, headers=auth_header(recruiter))

    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Initech"
    assert body["is_active"] is True
    assert "recruiter_id" not in body
    assert db.companies.find_one({})["recruiter_id"] == recruiter["_id"]


def test_create_company_validation(client, db, recruiter):
    resp = client.post("/api/companies", json={**COMPANY_BODY, "employee_count": "lots"},
                       headers=auth_header(recruiter))
    assert resp.status_code == 400

    assert client.post("/api/companies", json=COMPANY_BODY, headers=auth_header(make_user(db))).status_code == 403


def test_list_counts_open_positions(client, db, recruiter):
    acme = make_company(db, recruiter, name="Acme")
    make_company(db, recruiter, name="Hidden", is_active=False)
    make_company(db, recruiter, name="Bolt", industry="Energy")
    make_job(db, recruiter, company_id=acme["_id"])
    make_job(db, recruiter, company_id=acme["_id"], status="draft")
    make_job(db, recruiter, company_id=acme["_id"], deadline=past())

    body = client.get("/api/companies").json()

    assert [(c["name"], c["open_positions"]) for c in body["data"]] == [("Acme", 1), ("Bolt", 0)]
    assert body["pagination"]["total"] == 2

    assert [c["name"] for c in client.get("/api/companies?search=bol").json()["data"]] == ["Bolt"]
    assert [c["name"] for c in client.get("/api/companies?industry=Software").json()["data"]] == ["Acme"]


def test_get_company(client, db, recruiter):
    company = make_company(db, recruiter)
    hidden = make_company(db, recruiter, is_active=False)

    assert client.get(f"/api/companies/{company['_id']}").json()["open_positions"] == 0
    assert client.get(f"/api/companies/{hidden['_id']}").status_code == 404
    assert client.get("/api/companies/not-an-id").status_code == 404


def test_update_company_refreshes_job_summary(client, db, recruiter):
    company = make_company(db, recruiter)
    job = make_job(db, recruiter, company_id=company["_id"])
    path = f"/api/companies/{company['_id']}"

    resp = client.put(path, json={"name": "Acme Labs"}, headers=auth_header(recruiter))

    assert resp.status_code == 200
    assert resp.json()["name"] == "Acme Labs"
    assert db.jobs.find_one({"_id": job["_id"]})["company"]["name"] == "Acme Labs"

    other = make_user(db, "recruiter")
    assert client.put(path, json={"name": "Mine now"}, headers=auth_header(other)).status_code == 403


def test_company_jobs_lists_open_jobs_only(client, db, recruiter):
    company = make_company(db, recruiter)
    open_job = make_job(db, recruiter, company_id=company["_id"])
    make_job(db, recruiter, company_id=company["_id"], status="closed")
    make_job(db, recruiter)

    resp = client.get(f"/api/companies/{company['_id']}/jobs")

    assert resp.status_code == 200
    assert [j["id"] for j in resp.json()] == [str(open_job["_id"])]
    assert resp.json()[0]["company_id"] == str(company["_id"])
