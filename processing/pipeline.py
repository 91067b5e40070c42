"""
Pipeline orchestrator — validate → normalize → score.

One full run walks the states

    EMPTY → VALIDATING → INVALID
                       → NORMALIZING → SCORING → READY

An invalid batch short-circuits with no records.  The pipeline is total:
data problems land in the ValidationReport, and any unexpected exception is
logged and turned into an empty result instead of reaching the caller.

ScoringSession holds the post-normalization records of the last good load
so a weight change rescoring goes straight to SCORING without validating or
normalizing again.

Public API:
    process(raw_rows, weights) → list[CountryRecord]
    run_pipeline(raw_rows, weights) → PipelineResult
    ScoringSession
"""

import enum
import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from processing.normalizer import normalize
from processing.scorer import CountryRecord, score
from processing.validator import RawRow, ValidatedRecord, ValidationReport, validate

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    EMPTY = "empty"
    VALIDATING = "validating"
    INVALID = "invalid"
    NORMALIZING = "normalizing"
    SCORING = "scoring"
    READY = "ready"


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PipelineResult:
    """Everything one pipeline run produced."""

    records: list[CountryRecord] = field(default_factory=list)
    report: ValidationReport = field(default_factory=ValidationReport)
    state: PipelineState = PipelineState.EMPTY
    normalized: list[ValidatedRecord] = field(default_factory=list)
    """Post-normalization, pre-weight records; cached for rescoring."""


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def run_pipeline(
    raw_rows: Sequence[RawRow | None],
    weights: Mapping[str, float],
) -> PipelineResult:
    """
    Run the full pipeline and keep the report alongside the records.

    Args:
        raw_rows: Ingested rows (header → raw cell value).
        weights: Sector key → weight in effect for this run.

    Returns:
        PipelineResult in state READY or INVALID.  On an unexpected failure
        the report carries an "Error processing data" entry.
    """
    result = PipelineResult()

    try:
        result.state = PipelineState.VALIDATING
        validation = validate(raw_rows)
        result.report = validation.report

        if not validation.report.is_valid:
            logger.info(
                f"Data validation failed with {len(validation.report.errors)} "
                f"errors; no records produced"
            )
            result.state = PipelineState.INVALID
            return result

        result.state = PipelineState.NORMALIZING
        result.normalized = normalize(validation.records)

        result.state = PipelineState.SCORING
        result.records = score(result.normalized, weights)

        result.state = PipelineState.READY
    except Exception as exc:
        logger.error(f"Error processing data: {exc}", exc_info=True)
        result.report.errors.append(f"Error processing data: {exc}")
        result.report.is_valid = False
        result.records = []
        result.normalized = []
        result.state = PipelineState.INVALID

    return result


def process(
    raw_rows: Sequence[RawRow | None],
    weights: Mapping[str, float],
) -> list[CountryRecord]:
    """
    Validate, normalize, and score *raw_rows*.

    Returns an empty list for invalid input or on any internal failure;
    callers that need to tell those apart use run_pipeline() and read the
    report.
    """
    return run_pipeline(raw_rows, weights).records


# ═══════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════

class ScoringSession:
    """
    Caller-owned cache of one ingested file, rescored on weight changes.

    load() and rescore() are serialized, so a rescore triggered while a new
    file is loading sees either the old or the new data, never a mix.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._normalized: list[ValidatedRecord] = []
        self._records: list[CountryRecord] = []
        self._report = ValidationReport()
        self._weights: dict = {}
        self._state = PipelineState.EMPTY

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def records(self) -> list[CountryRecord]:
        return list(self._records)

    @property
    def report(self) -> ValidationReport:
        return self._report

    @property
    def weights(self) -> dict:
        return dict(self._weights)

    def load(
        self,
        raw_rows: Sequence[RawRow | None],
        weights: Mapping[str, float],
    ) -> list[CountryRecord]:
        """Run the full pipeline on a new file and cache its output."""
        with self._lock:
            result = run_pipeline(raw_rows, weights)
            self._report = result.report
            self._normalized = result.normalized
            self._records = result.records
            self._weights = dict(weights)
            self._state = result.state
            return list(self._records)

    def rescore(self, weights: Mapping[str, float]) -> list[CountryRecord]:
        """
        Rescore the cached records with new weights.

        The weights are remembered either way; the result is an empty list
        when no valid file has been loaded.
        """
        with self._lock:
            self._weights = dict(weights)
            if self._state is not PipelineState.READY:
                logger.debug(f"Rescore skipped in state {self._state.value}")
                return []

            self._state = PipelineState.SCORING
            try:
                self._records = score(self._normalized, weights)
            except Exception as exc:
                logger.error(f"Error rescoring data: {exc}", exc_info=True)
                self._records = []
            finally:
                self._state = PipelineState.READY
            return list(self._records)

    def reset(self) -> None:
        """Forget the loaded file."""
        with self._lock:
            self._normalized = []
            self._records = []
            self._report = ValidationReport()
            self._state = PipelineState.EMPTY
