import pytest

from conftest import auth_header, make_company, make_job, make_resume, make_user, past
from hirehub.services.job_service import build_search_query

JOB_BODY = {
    "title": "Data Engineer",
    "description": "Pipelines and warehouses",
    "location": "Remote",
    "type": "full-time",
    "experience_level": "senior",
    "salary": {"min": 90000, "max": 120000},
    "company": {"name": "Globex"},
    "category": "Data",
    "skills": ["Python", "SQL"],
}


@pytest.fixture
def recruiter(db):
    return make_user(db, "recruiter")


def test_create_job_defaults_to_draft(client, db, recruiter):
    resp = client.post("/api/jobs", json=JOB_BODY, headers=auth_header(recruiter))

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "draft"
    assert body["recruiter_id"] == str(recruiter["_id"])
    assert body["views"] == 0 and body["applicant_count"] == 0
    assert body["salary"]["period"] == "yearly"


def test_create_job_validation(client, recruiter, db):
    bad_salary = {**JOB_BODY, "salary": {"min": 10, "max": 5}}
    resp = client.post("/api/jobs", json=bad_salary, headers=auth_header(recruiter))
    assert resp.status_code == 400
    assert resp.json()["errors"]

    resp = client.post("/api/jobs", json={**JOB_BODY, "type": "gig"}, headers=auth_header(recruiter))
    assert resp.status_code == 400
    assert any(e["field"] == "type" for e in resp.json()["errors"])

    assert client.post("/api/jobs", json=JOB_BODY, headers=auth_header(make_user(db))).status_code == 403


def test_public_search_only_lists_open_jobs(client, db, recruiter):
    open_job = make_job(db, recruiter)
    make_job(db, recruiter, status="draft")
    make_job(db, recruiter, status="archived")
    make_job(db, recruiter, deadline=past())

    body = client.get("/api/jobs").json()

    assert [j["id"] for j in body["data"]] == [str(open_job["_id"])]
    assert body["pagination"]["total"] == 1
    assert all(j["match_score"] is None for j in body["data"])


def test_search_matches_text_fields(client, db, recruiter):
    make_job(db, recruiter, title="Frontend Developer", skills=["Vue"])
    make_job(db, recruiter, title="Analyst", company={"name": "Initech"}, skills=["Excel"])
    make_job(db, recruiter, title="SRE (on-call)", skills=["Linux"])

    def titles(query):
        return sorted(j["title"] for j in client.get(f"/api/jobs?{query}").json()["data"])

    assert titles("search=frontend") == ["Frontend Developer"]
    assert titles("search=initech") == ["Analyst"]
    assert titles("search=vue") == ["Frontend Developer"]
    assert titles("search=(on-call)") == ["SRE (on-call)"]


def test_search_filters(client, db, recruiter):
    make_job(db, recruiter, title="A", location="Berlin", type="contract",
             salary={"min": 10, "max": 20, "currency": "USD", "period": "hourly"})
    make_job(db, recruiter, title="B", location="Paris", experience_level="senior", category="Data")

    def titles(query):
        return sorted(j["title"] for j in client.get(f"/api/jobs?{query}").json()["data"])

    assert titles("location=berlin") == ["A"]
    assert titles("type=contract") == ["A"]
    assert titles("experience_level=senior") == ["B"]
    assert titles("category=Data") == ["B"]
    assert titles("min_salary=1000") == ["B"]
    assert titles("max_salary=15") == ["A"]
    assert client.get("/api/jobs?limit=51").status_code == 400


def test_search_pagination(client, db, recruiter):
    for i in range(5):
        make_job(db, recruiter, title=f"Job {i}")

    body = client.get("/api/jobs?page=2&limit=2").json()

    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}


def test_candidate_search_is_ranked(client, db, recruiter):
    candidate = make_user(db)
    make_resume(db, candidate, skills=["Go"])
    make_job(db, recruiter, title="Python", skills=["Python"])
    make_job(db, recruiter, title="Go", skills=["Go"])

    body = client.get("/api/jobs", headers=auth_header(candidate)).json()

    assert [(j["title"], j["match_score"]) for j in body["data"]] == [("Go", 100), ("Python", 0)]


def test_build_search_query_combines_clauses():
    query = build_search_query(search="py", location="Berlin")
    assert len(query["$and"]) == 3
    assert query["$and"][0]["status"] == "published"


def test_get_job_counts_views(client, db, recruiter):
    job = make_job(db, recruiter)

    client.get(f"/api/jobs/{job['_id']}")
    resp = client.get(f"/api/jobs/{job['_id']}")

    assert resp.status_code == 200
    assert resp.json()["views"] == 2


def test_draft_visible_to_owner_only(client, db, recruiter):
    job = make_job(db, recruiter, status="draft")
    path = f"/api/jobs/{job['_id']}"

    assert client.get(path).status_code == 404
    assert client.get(path, headers=auth_header(make_user(db, "recruiter"))).status_code == 404
    assert client.get(path, headers=auth_header(recruiter)).status_code == 200
    assert client.get("/api/jobs/not-an-id").status_code == 404


def test_my_jobs(client, db, recruiter):
    make_job(db, recruiter, status="draft")
    make_job(db, recruiter)
    make_job(db, make_user(db, "recruiter"))

    resp = client.get("/api/jobs/mine", headers=auth_header(recruiter))
    assert len(resp.json()) == 2

    resp = client.get("/api/jobs/mine?status=draft", headers=auth_header(recruiter))
    assert [j["status"] for j in resp.json()] == ["draft"]


def test_update_job(client, db, recruiter):
    job = make_job(db, recruiter, status="draft")
    path = f"/api/jobs/{job['_id']}"

    resp = client.put(path, json={"status": "published", "skills": ["Rust"]}, headers=auth_header(recruiter))

    assert resp.status_code == 200
    assert resp.json()["status"] == "published"
    assert resp.json()["skills"] == ["Rust"]
    assert resp.json()["title"] == job["title"]

    other = make_user(db, "recruiter")
    assert client.put(path, json={"title": "Hijacked"}, headers=auth_header(other)).status_code == 403


def test_delete_job_archives(client, db, recruiter):
    job = make_job(db, recruiter)

    resp = client.delete(f"/api/jobs/{job['_id']}", headers=auth_header(recruiter))

    assert resp.status_code == 200
    assert db.jobs.find_one({"_id": job["_id"]})["status"] == "archived"
    assert client.get("/api/jobs").json()["data"] == []


def test_candidate_ranking_spans_pages(client, db, recruiter):
    candidate = make_user(db)
    make_resume(db, candidate, skills=["Go"])
    make_job(db, recruiter, title="Go", skills=["Go"])
    make_job(db, recruiter, title="Py1", skills=["Python"])
    make_job(db, recruiter, title="Py2", skills=["Python"])

    first = client.get("/api/jobs?page=1&limit=2", headers=auth_header(candidate)).json()
    second = client.get("/api/jobs?page=2&limit=2", headers=auth_header(candidate)).json()

    assert [(j["title"], j["match_score"]) for j in first["data"]] == [("Go", 100), ("Py2", 0)]
    assert [j["title"] for j in second["data"]] == ["Py1"]
    assert first["pagination"]["total"] == 3


def test_expired_job_visible_to_owner_only(client, db, recruiter):
    job = make_job(db, recruiter, deadline=past())
    path = f"/api/jobs/{job['_id']}"

    assert client.get(path).status_code == 404
    assert client.get(path, headers=auth_header(make_user(db))).status_code == 404
    assert client.get(path, headers=auth_header(recruiter)).status_code == 200


def test_create_job_for_own_company(client, db, recruiter):
    company = make_company(db, recruiter, name="Globex Corp")
    body = {k: v for k, v in JOB_BODY.items() if k != "company"}

    resp = client.post("/api/jobs", json={**body, "company_id": str(company["_id"])}, headers=auth_header(recruiter))

    assert resp.status_code == 201
    assert resp.json()["company_id"] == str(company["_id"])
    assert resp.json()["company"]["name"] == "Globex Corp"

    other = make_user(db, "recruiter")
    resp = client.post("/api/jobs", json={**body, "company_id": str(company["_id"])}, headers=auth_header(other))
    assert resp.status_code == 403
    assert client.post("/api/jobs", json=body, headers=auth_header(recruiter)).status_code == 400
