import pytest

from conftest import auth_header, future, make_job, make_resume, make_user, past
from hirehub.services.matching_service import (
    RecommendationService, calculate_match_score, candidate_skills_for, rank_jobs
)


@pytest.mark.parametrize("job_skills,candidate_skills,expected", [
    (["React", "Node"], ["React"], 50),
    (["React", "Node"], ["react", "NODE"], 100),
    (["Python"], [], 0),
    ([], ["Python"], 0),
    (None, ["Python"], 0),
    (["React"], ["React Native"], 100),
    (["JavaScript"], ["Java"], 100),
    (["A", "B", "C"], ["A"], 33),
    (["A", "B", "C"], ["A", "B"], 67),
    (["A", "B", "C", "D", "E", "F", "G", "H"], ["A"], 13),
])
def test_calculate_match_score(job_skills, candidate_skills, expected):
    assert calculate_match_score(job_skills, candidate_skills) == expected


def test_half_rounds_up():
    # 1/8 = 12.5
    skills = [f"skill{i}x" for i in range(8)]
    assert calculate_match_score(skills, ["skill0x"]) == 13


def test_score_is_clamped_to_100():
    assert calculate_match_score(["React"], ["React", "React Native", "react.js"]) == 100


def test_non_string_skills_never_match():
    assert calculate_match_score(["Python", 42, None], [None, 7, "python"]) == 33
    assert calculate_match_score(["Python"], [{"name": "Python"}]) == 0


def test_candidate_skills_prefer_resume():
    resume = {"parsed_data": {"skills": ["Go"]}}
    user = {"skills": ["Python"]}
    assert candidate_skills_for(resume, user) == ["Go"]
    assert candidate_skills_for({"parsed_data": {"skills": []}}, user) == ["Python"]
    assert candidate_skills_for(None, None) == []


def test_rank_jobs_sorts_best_first():
    jobs = [{"title": "a", "skills": ["Go"]}, {"title": "b", "skills": ["Python"]}, {"title": "c", "skills": []}]
    ranked = rank_jobs(jobs, ["python"])
    assert [j["title"] for j in ranked] == ["b", "a", "c"]
    assert ranked[0]["match_score"] == 100


def test_recommend_keeps_open_jobs_above_threshold(db):
    recruiter = make_user(db, "recruiter")
    candidate = make_user(db, skills=["Python"])
    make_resume(db, candidate, skills=["Python", "React"])

    full = make_job(db, recruiter, skills=["Python", "React"])
    make_job(db, recruiter, skills=["Python", "React", "Go"], title="Two thirds")
    make_job(db, recruiter, skills=["Python", "Go", "Rust"], title="One third")
    make_job(db, recruiter, skills=["Python"], status="draft")
    make_job(db, recruiter, skills=["Python"], deadline=past())
    later = make_job(db, recruiter, skills=["React"], deadline=future())

    results = RecommendationService(db).recommend(candidate)

    assert {j["_id"] for j in results[:2]} == {full["_id"], later["_id"]}
    assert [j["match_score"] for j in results] == [100, 100, 67]


def test_recommend_threshold_is_strict(db):
    recruiter = make_user(db, "recruiter")
    candidate = make_user(db, skills=["Python"])
    make_job(db, recruiter, skills=["Python", "Go"])

    assert RecommendationService(db).recommend(candidate, min_score=50) == []
    assert len(RecommendationService(db).recommend(candidate, min_score=49)) == 1


def test_recommended_endpoint(client, db):
    recruiter = make_user(db, "recruiter")
    candidate = make_user(db, skills=["Python"])
    make_job(db, recruiter, skills=["Python"])

    resp = client.get("/api/jobs/recommended", headers=auth_header(candidate))
    assert resp.status_code == 200
    assert resp.json()[0]["match_score"] == 100

    resp = client.get("/api/jobs/recommended", headers=auth_header(recruiter))
    assert resp.status_code == 403
