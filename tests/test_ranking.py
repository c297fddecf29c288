import io
from datetime import date

import pandas as pd
import pytest

from resume_screener.models.models import CandidateMatch, ScreeningResult
from resume_screener.services.ranking import (
    CSV_COLUMNS,
    export_filename,
    is_top_match,
    matches_to_csv,
    rank_matches,
    render_markdown,
    write_csv_report,
)


def make_result(payload_factory, candidate_factory, *scored):
    matches = [candidate_factory(name, score) for name, score in scored]
    return ScreeningResult.model_validate(payload_factory(*matches))


class TestRankMatches:
    """Test cases for ranking validated matches"""

    def test_sorted_by_score_descending(self, payload_factory, candidate_factory):
        result = make_result(payload_factory, candidate_factory, ("A", 40), ("B", 95), ("C", 70))
        ranked = rank_matches(result)
        assert [r.match.candidate_name for r in ranked] == ["B", "C", "A"]
        assert [r.rank for r in ranked] == [1, 2, 3]

    def test_monotonically_non_increasing(self, payload_factory, candidate_factory):
        scores = [12, 88, 88, 0, 100, 55, 88, 79, 80]
        result = make_result(payload_factory, candidate_factory, *[(f"c{i}", s) for i, s in enumerate(scores)])
        ranked = rank_matches(result)
        for a, b in zip(ranked, ranked[1:]):
            assert a.match.match_score >= b.match.match_score

    def test_ties_keep_model_order(self, payload_factory, candidate_factory):
        result = make_result(payload_factory, candidate_factory, ("first", 70), ("top", 90), ("second", 70), ("third", 70))
        ranked = rank_matches(result)
        assert [r.match.candidate_name for r in ranked] == ["top", "first", "second", "third"]

    def test_empty_result(self, payload_factory):
        assert rank_matches(ScreeningResult.model_validate(payload_factory())) == []

    def test_does_not_mutate_result(self, payload_factory, candidate_factory):
        result = make_result(payload_factory, candidate_factory, ("A", 10), ("B", 90))
        rank_matches(result)
        assert [m.candidate_name for m in result.matches] == ["A", "B"]


class TestTopMatch:
    """Test cases for the top match threshold"""

    @pytest.mark.parametrize("score,expected", [(79, False), (80, True), (100, True), (0, False)])
    def test_threshold(self, candidate_factory, score, expected):
        match = CandidateMatch.model_validate(candidate_factory("X", score))
        assert is_top_match(match) is expected

    def test_flag_on_ranked_match(self, payload_factory, candidate_factory):
        ranked = rank_matches(make_result(payload_factory, candidate_factory, ("low", 79), ("high", 80)))
        assert [(r.match.candidate_name, r.is_top_match) for r in ranked] == [("high", True), ("low", False)]


class TestCsvExport:
    """Test cases for the CSV export"""

    def test_header_and_one_row_per_candidate(self, payload_factory, candidate_factory):
        result = make_result(payload_factory, candidate_factory, ("A", 40), ("B", 95))
        lines = matches_to_csv(rank_matches(result)).strip("\n").split("\n")
        assert len(lines) == 3
        assert lines[0] == ",".join(f'"{c}"' for c in CSV_COLUMNS)
        assert lines[1].startswith('"1","B","95%"')

    def test_row_contents(self, payload_factory, candidate_factory):
        match = candidate_factory(
            "Jane", 88,
            strengths=["Go", "Kafka"],
            gaps=["No Kubernetes"],
            recommendation="Interview",
        )
        result = ScreeningResult.model_validate(payload_factory(match))
        frame = pd.read_csv(io.StringIO(matches_to_csv(rank_matches(result))), dtype=str, keep_default_na=False)
        assert list(frame.columns) == CSV_COLUMNS
        assert frame.iloc[0].tolist() == ["1", "Jane", "88%", "Go; Kafka", "No Kubernetes", "Interview"]

    def test_quotes_doubled_and_round_trip(self, payload_factory, candidate_factory):
        strength = 'Led the "Phoenix" migration, saved 30%'
        gap = 'No "hands-on" Kubernetes'
        match = candidate_factory('Jane "JJ" Doe', 90, strengths=[strength], gaps=[gap], recommendation='Say "yes"')
        result = ScreeningResult.model_validate(payload_factory(match))
        text = matches_to_csv(rank_matches(result))

        assert '"Led the ""Phoenix"" migration, saved 30%"' in text
        assert '"No ""hands-on"" Kubernetes"' in text

        row = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False).iloc[0]
        assert row["Candidate Name"] == 'Jane "JJ" Doe'
        assert row["Key Strengths"] == strength
        assert row["Gaps Identified"] == gap
        assert row["Recommendation"] == 'Say "yes"'

    def test_empty_gaps_export_as_empty_cell(self, payload_factory, candidate_factory):
        result = ScreeningResult.model_validate(payload_factory(candidate_factory("A", 50, gaps=[])))
        row = pd.read_csv(io.StringIO(matches_to_csv(rank_matches(result))), dtype=str, keep_default_na=False).iloc[0]
        assert row["Gaps Identified"] == ""

    def test_header_only_for_no_matches(self, payload_factory):
        text = matches_to_csv(rank_matches(ScreeningResult.model_validate(payload_factory())))
        assert text.strip("\n").split("\n") == [",".join(f'"{c}"' for c in CSV_COLUMNS)]

    def test_export_filename_embeds_date(self):
        assert export_filename(date(2024, 3, 9)) == "resume-screening-results-2024-03-09.csv"

    def test_export_filename_defaults_to_today(self):
        assert export_filename() == f"resume-screening-results-{date.today().isoformat()}.csv"

    def test_write_csv_report(self, tmp_path, payload_factory, candidate_factory):
        result = make_result(payload_factory, candidate_factory, ("A", 40), ("B", 95))
        path = write_csv_report(result, str(tmp_path / "reports"), on=date(2025, 1, 2))
        assert path.name == "resume-screening-results-2025-01-02.csv"
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        assert frame["Candidate Name"].tolist() == ["B", "A"]


class TestMarkdownReport:
    """Test cases for the markdown rendering"""

    def test_contains_summary_table_and_comparison(self, payload_factory, candidate_factory):
        result = ScreeningResult.model_validate(payload_factory(
            candidate_factory("Low", 30),
            candidate_factory("High", 85),
            summary="High is best.",
            comparison="High beats Low on every axis.",
        ))
        md = render_markdown(result)
        assert "**Summary**: High is best." in md
        assert "| 1 | High | 85% | yes |" in md
        assert "| 2 | Low | 30% |  |" in md
        assert "High beats Low on every axis." in md

    def test_no_matches(self, payload_factory):
        md = render_markdown(ScreeningResult.model_validate(payload_factory()))
        assert "No candidates were returned." in md
