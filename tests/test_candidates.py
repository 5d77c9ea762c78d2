import pytest

from conftest import auth_header, make_job, make_resume, make_user


@pytest.fixture
def recruiter(db):
    return make_user(db, "recruiter")


def apply(client, candidate, job):
    resp = client.post("/api/applications", json={"job_id": str(job["_id"])}, headers=auth_header(candidate))
    assert resp.status_code == 201
    return resp.json()


def test_pipeline_groups_applications_per_candidate(client, db, recruiter):
    backend = make_job(db, recruiter, title="Backend", skills=["Python", "React"])
    data = make_job(db, recruiter, title="Data", skills=["Python"])
    foreign = make_job(db, make_user(db, "recruiter"), title="Elsewhere")

    ada = make_user(db, first_name="Ada")
    make_resume(db, ada, skills=["Python"])
    bob = make_user(db, first_name="Bob")
    make_resume(db, bob, skills=["Go"])

    apply(client, ada, backend)
    apply(client, ada, data)
    apply(client, bob, backend)
    apply(client, bob, foreign)

    resp = client.get("/api/recruiter/candidates", headers=auth_header(recruiter))

    assert resp.status_code == 200
    pipeline = {c["first_name"]: c for c in resp.json()}
    assert set(pipeline) == {"Ada", "Bob"}
    assert sorted(j["job_title"] for j in pipeline["Ada"]["applied_jobs"]) == ["Backend", "Data"]
    assert pipeline["Ada"]["match_score"] == 100
    assert pipeline["Ada"]["resume_url"] == "/uploads/cv.pdf"
    assert [j["job_title"] for j in pipeline["Bob"]["applied_jobs"]] == ["Backend"]
    assert pipeline["Bob"]["applied_jobs"][0]["status"] == "applied"
    assert "password_hash" not in pipeline["Bob"]


def test_pipeline_empty_without_jobs(client, db, recruiter):
    resp = client.get("/api/recruiter/candidates", headers=auth_header(recruiter))

    assert resp.status_code == 200
    assert resp.json() == []
    assert client.get("/api/recruiter/candidates", headers=auth_header(make_user(db))).status_code == 403


def test_candidate_detail(client, db, recruiter):
    job = make_job(db, recruiter)
    candidate = make_user(db)
    resume = make_resume(db, candidate, skills=["Python"])
    application = apply(client, candidate, job)

    resp = client.get(f"/api/recruiter/candidates/{candidate['_id']}", headers=auth_header(recruiter))

    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == candidate["email"]
    assert body["resume"]["id"] == str(resume["_id"])
    assert [a["application_id"] for a in body["applications"]] == [application["id"]]
    assert body["applications"][0]["matching_score"] == 50


def test_candidate_detail_requires_application_to_own_job(client, db, recruiter):
    candidate = make_user(db)
    make_resume(db, candidate)
    apply(client, candidate, make_job(db, make_user(db, "recruiter")))
    path = f"/api/recruiter/candidates/{candidate['_id']}"

    assert client.get(path, headers=auth_header(recruiter)).status_code == 404
    assert client.get("/api/recruiter/candidates/not-an-id", headers=auth_header(recruiter)).status_code == 404
