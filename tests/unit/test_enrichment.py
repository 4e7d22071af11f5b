"""Unit tests for document type detection and findings extraction."""

import pytest
import pytest_check as check

from highway_assist.analysis import detect_document_type, enrich
from highway_assist.analysis import enrichment
from highway_assist.models import DocumentType

HIGHWAY_ANALYSIS = """**Subtask 1 - Extract Dimensions**
Carriageway 7.0 m as per IRC 38.

<subtask3>
| Element | Dimension | IRC Code | Remarks |
| Carriageway | 7.0 m | IRC 38 | ✅ compliant |
| Shoulder | not present | IRC 73 | ❌ non-compliant |
</subtask3>

<subtask4>
Median width is missing in clause 2.1.
</subtask4>
"""


class TestDetectDocumentType:
    """Tests for highway engineering vs general classification."""

    @pytest.mark.parametrize("filename", ["Schedule_B.pdf", "NH44_highway.pdf", "ring-road.pdf"])
    def test_filename_markers(self, filename: str) -> None:
        assert detect_document_type("", filename) == DocumentType.HIGHWAY

    def test_two_content_markers(self) -> None:
        text = "The carriageway and the embankment follow the typical cross section."

        assert detect_document_type(text, "design.pdf") == DocumentType.HIGHWAY

    def test_single_content_marker_is_general(self) -> None:
        assert detect_document_type("Pavement repairs budget", "budget.pdf") == DocumentType.GENERAL

    def test_unrelated_document(self) -> None:
        assert detect_document_type("Minutes of the board meeting", "minutes.pdf") == DocumentType.GENERAL


class TestHighwayFindings:
    """Tests for extraction from highway engineering analyses."""

    def test_score_counts_failed_checks(self) -> None:
        """Two failed checks against the ten-check floor give 80%."""
        result = enrich(HIGHWAY_ANALYSIS, DocumentType.HIGHWAY)

        check.is_true(result.success)
        check.equal(result.compliance_score, 80)
        check.equal(result.analysis, HIGHWAY_ANALYSIS)

    def test_fully_compliant_document(self) -> None:
        text = "\n".join(f"Clause {i}: IRC {i} ✅" for i in range(1, 13))

        result = enrich(text, DocumentType.HIGHWAY)

        assert result.compliance_score == 100

    def test_score_never_negative(self) -> None:
        result = enrich("not present\n" * 15, DocumentType.HIGHWAY)

        assert result.compliance_score == 0

    def test_issues_from_subtask_four(self) -> None:
        result = enrich(HIGHWAY_ANALYSIS, DocumentType.HIGHWAY)

        markers = [issue.split(" - ")[0] for issue in result.issues]
        check.equal(markers, ["not present", "non-compliant", "missing"])

    def test_no_issues_without_subtask_four(self) -> None:
        text = HIGHWAY_ANALYSIS.split("<subtask4>")[0]

        result = enrich(text, DocumentType.HIGHWAY)

        assert result.issues == []

    def test_recommendations_from_flagged_rows(self) -> None:
        """Only rows marked non-compliant or for review become recommendations."""
        result = enrich(HIGHWAY_ANALYSIS, DocumentType.HIGHWAY)

        assert result.recommendations == ["Review Shoulder - ❌ non-compliant"]

    def test_summary(self) -> None:
        result = enrich(HIGHWAY_ANALYSIS, DocumentType.HIGHWAY)

        assert result.summary == (
            "Highway engineering document analysis completed with 80% compliance "
            "score. Found 3 IRC code references with 3 issues identified."
        )


class TestGeneralFindings:
    """Tests for extraction from general analyses."""

    def test_score_from_indicator_words(self) -> None:
        text = (
            "The document is compliant with the brief.\n"
            "One issue: the annex is missing.\n"
            "We recommend adding the annex.\n"
        )

        result = enrich(text, DocumentType.GENERAL)

        check.equal(result.compliance_score, 50)
        check.equal(result.issues, ["One issue: the annex is missing."])
        check.equal(result.recommendations, ["We recommend adding the annex."])
        check.equal(result.summary, "Document analysis completed with general compliance review.")

    def test_no_indicators_means_no_score(self) -> None:
        result = enrich("A short memo about parking.", DocumentType.GENERAL)

        assert result.compliance_score is None

    def test_findings_are_capped(self) -> None:
        text = "\n".join(f"Issue {i}: something is off" for i in range(10))

        result = enrich(text, DocumentType.GENERAL)

        assert len(result.issues) == 5


class TestEnrichFallback:
    """Tests for extraction failures."""

    def test_extraction_failure_keeps_analysis(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A broken extractor still yields a successful result with the raw text."""

        def broken(text: str) -> None:
            raise ValueError("unexpected layout")

        monkeypatch.setattr(enrichment, "_highway_findings", broken)

        result = enrich("raw analysis", DocumentType.HIGHWAY)

        check.is_true(result.success)
        check.equal(result.analysis, "raw analysis")
        check.equal(result.summary, "Analysis completed successfully")
        check.is_none(result.compliance_score)
