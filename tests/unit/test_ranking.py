"""Unit tests for ranking, filtering and batch summaries."""

import pytest

from careerflow.schemas.geo import Coordinates
from careerflow.schemas.match import MatchOptions
from careerflow.services import ranking
from tests.conftest import make_candidate, make_job


def _job_at(job_id: str, latitude: float | None, **overrides):
    coords = Coordinates(latitude=latitude, longitude=-122.41) if latitude is not None else None
    return make_job(id=job_id, coordinates=coords, **overrides)


@pytest.mark.unit
class TestRank:
    def test_sorted_by_score_descending(self) -> None:
        jobs = [
            _job_at("weak", 37.788, skills=["Go", "Rust", "React"]),
            _job_at("strong", 37.788, skills=["React", "Node.js"]),
        ]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(min_score=0))
        assert [r.job_id for r in results] == ["strong", "weak"]
        assert results[0].score >= results[1].score

    def test_min_score_filter(self) -> None:
        jobs = [_job_at("good", 37.788), _job_at("poor", 37.788, skills=["Go", "Rust"])]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(min_score=60))
        assert [r.job_id for r in results] == ["good"]
        assert all(r.score >= 60 for r in results)

    def test_limit(self) -> None:
        jobs = [_job_at(f"job-{i}", 37.788) for i in range(5)]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(limit=2, min_score=0))
        assert len(results) == 2

    def test_ties_break_on_job_id(self) -> None:
        jobs = [_job_at("b", 37.788), _job_at("a", 37.788)]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(min_score=0))
        assert [r.job_id for r in results] == ["a", "b"]

    def test_max_distance_excludes_far_and_unknown(self) -> None:
        jobs = [
            _job_at("near", 37.788),
            _job_at("far", 38.5),
            _job_at("nowhere", None, location="Remote"),
        ]
        results = ranking.rank(
            make_candidate(), jobs, MatchOptions(min_score=0, max_distance=10)
        )
        assert [r.job_id for r in results] == ["near"]

    def test_without_max_distance_unknown_distance_is_kept(self) -> None:
        jobs = [_job_at("near", 37.788), _job_at("nowhere", None, location="Remote")]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(min_score=0))
        assert {r.job_id for r in results} == {"near", "nowhere"}

    def test_sort_by_distance(self) -> None:
        jobs = [
            _job_at("far", 37.95),
            _job_at("nowhere", None, location="Remote"),
            _job_at("near", 37.78, skills=["Go"]),
        ]
        results = ranking.rank(
            make_candidate(), jobs, MatchOptions(min_score=0, sort_by_distance=True)
        )
        assert [r.job_id for r in results] == ["near", "far", "nowhere"]

    def test_empty_jobs(self) -> None:
        assert ranking.rank(make_candidate(), []) == []

    def test_default_options(self) -> None:
        results = ranking.rank(make_candidate(), [_job_at("job-1", 37.788)])
        assert len(results) == 1
        assert results[0].score >= 40


@pytest.mark.unit
class TestSummarize:
    def test_empty_batch(self) -> None:
        summary = ranking.summarize([])
        assert summary.total_matches == 0
        assert summary.average_score == 0.0
        assert summary.top_skills == []
        assert summary.recommendations == [ranking.NO_JOBS_RECOMMENDATION]

    def test_counts_and_average(self) -> None:
        jobs = [_job_at("a", 37.788), _job_at("b", 37.788, skills=["Go", "Rust"])]
        results = ranking.rank(make_candidate(), jobs, MatchOptions(min_score=0))
        summary = ranking.summarize(results)

        assert summary.total_matches == 2
        assert (
            summary.excellent_matches
            + summary.good_matches
            + summary.fair_matches
            + summary.poor_matches
            == 2
        )
        assert summary.average_score == round(sum(r.score for r in results) / 2, 1)

    def test_top_skills_and_gaps(self) -> None:
        jobs = [_job_at(f"job-{i}", 37.788) for i in range(3)]
        summary = ranking.summarize(ranking.rank(make_candidate(), jobs, MatchOptions(min_score=0)))

        assert summary.top_skills == ["React", "Node.js"]
        assert summary.skill_gaps == ["TypeScript"]
        assert "Consider developing: TypeScript" in summary.recommendations
        assert (
            "Good matches available. Focus on skill development for better scores."
            in summary.recommendations
        )

    def test_summary_text(self) -> None:
        results = ranking.rank(make_candidate(), [_job_at("a", 37.788)])
        text = ranking.summary_text(ranking.summarize(results), make_candidate())
        assert text == (
            "Found 1 job matches for Ada Lovelace. "
            "0 excellent matches, 1 good matches. Average match score: 72%."
        )
