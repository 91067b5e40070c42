"""
Tests for processing/pipeline.py

Covers: the end-to-end run (validate → normalize → score), short-circuit on
invalid data, totality on unexpected failures, pipeline states, and the
ScoringSession cache (rescoring without re-validation).
"""

import pytest

import processing.pipeline as pipeline
from config.schema import DEFAULT_SECTOR_WEIGHTS, SECTORS, Sector
from processing.pipeline import (
    PipelineResult,
    PipelineState,
    ScoringSession,
    process,
    run_pipeline,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_row(country: str = "Germany", value: object = 0.5, **overrides) -> dict:
    row = {
        "Country": country,
        "AI": value,
        "Quantum": value,
        "Semiconductors": value,
        "Biotech": value,
        "Space": value,
        "Fintech": value,
    }
    row.update(overrides)
    return row


def _make_rows() -> list[dict]:
    return [
        _make_row("USA", 0.9),
        _make_row("Germany", 0.6),
        _make_row("UK", 0.7),
        _make_row("Brazil", 0.3),
        _make_row("Japan", 0.8),
        _make_row("India", 0.4),
    ]


# ═══════════════════════════════════════════════════════════════════════════
# process / run_pipeline
# ═══════════════════════════════════════════════════════════════════════════

class TestProcess:
    def test_valid_rows_scored(self):
        records = process(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        assert len(records) == 6
        assert records[1].country == "Germany"
        assert records[1].total_score == pytest.approx(0.6, abs=1e-9)

    def test_names_normalized(self):
        records = process(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        countries = [r.country for r in records]
        assert countries[0] == "United States of America"
        assert countries[2] == "United Kingdom"

    def test_total_is_dot_product_of_raw_scores(self):
        rows = [_make_row("Chile", AI=0.1, Quantum=0.2, Semiconductors=0.3,
                          Biotech=0.4, Space=0.5, Fintech=0.6)]
        weights = {"ai": 0.05, "quantum": 0.15, "semiconductors": 0.25,
                   "biotech": 0.1, "space": 0.3, "fintech": 0.15}
        record = process(rows, weights)[0]
        expected = sum(record.raw_scores[s] * weights[s.value] for s in SECTORS)
        assert record.total_score == pytest.approx(expected, abs=1e-9)

    def test_contributions_sum_to_total_with_unit_weights(self):
        for record in process(_make_rows(), DEFAULT_SECTOR_WEIGHTS):
            assert sum(record.sector_scores.values()) == pytest.approx(
                record.total_score, abs=1e-9
            )

    def test_row_error_blocks_whole_batch(self):
        rows = _make_rows() + [_make_row("Chile", AI=-0.5)]
        assert process(rows, DEFAULT_SECTOR_WEIGHTS) == []

    def test_warnings_do_not_block(self):
        rows = _make_rows() + [_make_row("Germany", 0.1), _make_row("Chile", Space=1.4)]
        records = process(rows, DEFAULT_SECTOR_WEIGHTS)
        assert [r.country for r in records][-1] == "Chile"
        germany = next(r for r in records if r.country == "Germany")
        assert germany.raw_scores[Sector.AI] == 0.6

    def test_missing_column_returns_empty_with_single_error(self):
        rows = [{k: v for k, v in row.items() if k != "Quantum"} for row in _make_rows()]
        result = run_pipeline(rows, DEFAULT_SECTOR_WEIGHTS)
        assert result.records == []
        assert result.report.errors == ["Missing required columns: Quantum"]
        assert result.state is PipelineState.INVALID

    def test_empty_input(self):
        result = run_pipeline([], DEFAULT_SECTOR_WEIGHTS)
        assert result.records == []
        assert result.report.errors == ["No data provided"]

    def test_result_keeps_report_and_normalized_records(self):
        rows = _make_rows() + [_make_row("Japan")]
        result = run_pipeline(rows, DEFAULT_SECTOR_WEIGHTS)
        assert isinstance(result, PipelineResult)
        assert result.state is PipelineState.READY
        assert result.report.warnings == ["Duplicate country found: Japan"]
        assert result.normalized[0].country == "United States of America"

    def test_output_countries_unique(self):
        rows = _make_rows() + [_make_row("United States", 0.1)]
        records = process(rows, DEFAULT_SECTOR_WEIGHTS)
        countries = [r.country for r in records]
        assert len(countries) == len(set(countries))


# ═══════════════════════════════════════════════════════════════════════════
# Totality
# ═══════════════════════════════════════════════════════════════════════════

class TestTotality:
    def test_malformed_row_returns_empty(self):
        rows = [_make_row(), 12345]
        assert process(rows, DEFAULT_SECTOR_WEIGHTS) == []

    def test_malformed_row_reported(self):
        result = run_pipeline([_make_row(), 12345], DEFAULT_SECTOR_WEIGHTS)
        assert result.state is PipelineState.INVALID
        assert result.report.is_valid is False
        assert result.report.errors[-1].startswith("Error processing data:")

    def test_internal_failure_returns_empty(self, monkeypatch):
        def _boom(records, weights):
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline, "score", _boom)
        result = run_pipeline(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        assert result.records == []
        assert result.normalized == []
        assert result.report.errors == ["Error processing data: boom"]

    def test_bad_weight_value_does_not_raise(self):
        weights = dict(DEFAULT_SECTOR_WEIGHTS)
        weights[Sector.AI] = "heavy"
        assert process(_make_rows(), weights) == []


# ═══════════════════════════════════════════════════════════════════════════
# ScoringSession
# ═══════════════════════════════════════════════════════════════════════════

class TestScoringSession:
    def test_starts_empty(self):
        session = ScoringSession()
        assert session.state is PipelineState.EMPTY
        assert session.records == []
        assert session.report.errors == []

    def test_load_valid(self):
        session = ScoringSession()
        records = session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        assert len(records) == 6
        assert session.state is PipelineState.READY
        assert session.records == records

    def test_rescore_skips_validation(self, monkeypatch):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)

        def _fail(*args, **kwargs):
            raise AssertionError("validate must not run on rescore")

        monkeypatch.setattr(pipeline, "validate", _fail)
        monkeypatch.setattr(pipeline, "normalize", _fail)

        weights = {sector: 1.0 for sector in SECTORS}
        records = session.rescore(weights)
        assert records[1].total_score == pytest.approx(0.6 * 6)
        assert session.state is PipelineState.READY

    def test_rescore_matches_fresh_process(self):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        weights = {"ai": 0.5, "space": 0.5}
        assert session.rescore(weights) == process(_make_rows(), weights)

    def test_rescore_keeps_raw_scores(self):
        session = ScoringSession()
        before = session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        after = session.rescore({"ai": 1.0})
        assert [r.raw_scores for r in after] == [r.raw_scores for r in before]

    def test_rescore_before_load_returns_empty(self):
        session = ScoringSession()
        assert session.rescore(DEFAULT_SECTOR_WEIGHTS) == []
        assert session.state is PipelineState.EMPTY

    def test_invalid_load_clears_previous_data(self):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        records = session.load([_make_row(AI="x")], DEFAULT_SECTOR_WEIGHTS)
        assert records == []
        assert session.state is PipelineState.INVALID
        assert session.report.errors == ["Invalid ai value for Germany"]
        assert session.rescore(DEFAULT_SECTOR_WEIGHTS) == []

    def test_weights_remembered(self):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        session.rescore({"ai": 1.0})
        assert session.weights == {"ai": 1.0}

    def test_records_property_is_a_copy(self):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        session.records.clear()
        assert len(session.records) == 6

    def test_reset(self):
        session = ScoringSession()
        session.load(_make_rows(), DEFAULT_SECTOR_WEIGHTS)
        session.reset()
        assert session.state is PipelineState.EMPTY
        assert session.records == []
        assert session.rescore(DEFAULT_SECTOR_WEIGHTS) == []
