"""Best-effort extraction of structured findings from analysis text.

The analyzer answers in free text. Compliance score, issues and
recommendations are recovered by pattern matching over section markers in
that text, which is brittle by construction: nothing here may fail the
analysis itself. If extraction breaks, the raw text is returned as a plain
successful result.
"""

import logging
import re

from pydantic import BaseModel, Field

from highway_assist.models import AnalysisResult, DocumentType

logger = logging.getLogger(__name__)

HIGHWAY_FILENAME_MARKERS = ("schedule", "highway", "road")
HIGHWAY_CONTENT_MARKERS = (
    "highway", "cross section", "carriageway", "embankment", "median",
    "irc", "morth", "orange book", "road design", "pavement",
    "schedule b", "schedule-b", "schedule c", "schedule-c",
    "right of way", "formation width", "side slope", "camber",
)

MIN_HIGHWAY_CHECKS = 10
MAX_GENERAL_FINDINGS = 5

_IRC_REFERENCE = re.compile(r"IRC[\s-]*\d+", re.IGNORECASE)
_NOT_PRESENT = re.compile(r"not present", re.IGNORECASE)
_SUBTASK_3 = re.compile(r"subtask\s*3[\s\S]*?(?=subtask\s*4|$)", re.IGNORECASE)
_SUBTASK_4 = re.compile(r"subtask\s*4", re.IGNORECASE)
_TABLE_ROW = re.compile(r"\|[^|\n]+\|[^|\n]+\|[^|\n]+\|[^|\n]+\|")
_ISSUE_PATTERNS = [
    re.compile(r"not present", re.IGNORECASE),
    re.compile(r"non-compliant", re.IGNORECASE),
    re.compile(r"missing", re.IGNORECASE),
    re.compile(r"discrepancy", re.IGNORECASE),
    re.compile(r"issues?\s*identified", re.IGNORECASE),
    re.compile(r"differences?\s*highlighted", re.IGNORECASE),
]
_POSITIVE = re.compile(r"(?<!non-)\b(?:compliant|accurate|correct|complete)\b", re.IGNORECASE)
_NEGATIVE = re.compile(r"\b(?:non-compliant|incorrect|missing|incomplete)\b", re.IGNORECASE)

NON_COMPLIANT_MARK = "❌"
REVIEW_MARK = "⚠️"


class Findings(BaseModel):
    compliance_score: int | None = None
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    summary: str | None = None


def detect_document_type(content: str, filename: str) -> DocumentType:
    """Classify a document from its filename, then from its text.

    Two or more engineering terms in the text mark it as highway engineering.
    """
    name = filename.lower()
    if any(marker in name for marker in HIGHWAY_FILENAME_MARKERS):
        return DocumentType.HIGHWAY

    text = content.lower()
    hits = sum(1 for marker in HIGHWAY_CONTENT_MARKERS if marker in text)
    return DocumentType.HIGHWAY if hits >= 2 else DocumentType.GENERAL


def _issue_context(text: str, start: int, end: int) -> str:
    window = text[max(0, start - 50) : end + 100].strip()
    return window.split("\n")[0]


def _highway_findings(text: str) -> Findings:
    irc_references = _IRC_REFERENCE.findall(text)
    total_checks = max(len(irc_references), MIN_HIGHWAY_CHECKS)
    failed_checks = len(_NOT_PRESENT.findall(text)) + text.count(NON_COMPLIANT_MARK)
    score = max(0, round((total_checks - failed_checks) / total_checks * 100))

    issues: list[str] = []
    if _SUBTASK_4.search(text):
        for pattern in _ISSUE_PATTERNS:
            for match in pattern.finditer(text):
                marker = match.group(0)
                if any(marker in issue for issue in issues):
                    continue
                issues.append(f"{marker} - {_issue_context(text, match.start(), match.end())}")

    recommendations: list[str] = []
    section = _SUBTASK_3.search(text)
    if section:
        for row in _TABLE_ROW.findall(section.group(0)):
            if NON_COMPLIANT_MARK not in row and REVIEW_MARK not in row:
                continue
            cols = [col.strip() for col in row.split("|")]
            if len(cols) >= 5:
                recommendations.append(f"Review {cols[1]} - {cols[4]}")

    summary = (
        f"Highway engineering document analysis completed with {score}% compliance "
        f"score. Found {len(irc_references)} IRC code references with "
        f"{len(issues)} issues identified."
    )
    return Findings(
        compliance_score=score,
        issues=issues,
        recommendations=recommendations,
        summary=summary,
    )


def _lines_mentioning(text: str, words: tuple[str, ...]) -> list[str]:
    lines = [line.strip() for line in text.split("\n")]
    hits = [line for line in lines if line and any(w in line.lower() for w in words)]
    return hits[:MAX_GENERAL_FINDINGS]


def _general_findings(text: str) -> Findings:
    positive = len(_POSITIVE.findall(text))
    negative = len(_NEGATIVE.findall(text))
    total = positive + negative
    score = round(positive / total * 100) if total else None

    return Findings(
        compliance_score=score,
        issues=_lines_mentioning(text, ("issue", "problem", "error")),
        recommendations=_lines_mentioning(text, ("recommend", "suggest", "should")),
        summary="Document analysis completed with general compliance review.",
    )


def enrich(text: str, document_type: DocumentType) -> AnalysisResult:
    """Build a successful AnalysisResult from raw analysis text.

    Args:
        text: Free-text analysis returned by the analyzer.
        document_type: Which marker set to look for.

    Returns:
        AnalysisResult with whatever findings could be recovered.
    """
    try:
        if document_type is DocumentType.HIGHWAY:
            findings = _highway_findings(text)
        else:
            findings = _general_findings(text)
        return AnalysisResult(
            success=True,
            analysis=text,
            compliance_score=findings.compliance_score,
            issues=findings.issues,
            recommendations=findings.recommendations,
            summary=findings.summary,
        )
    except Exception as e:
        logger.warning(f"Could not extract findings from analysis text: {e}")
        return AnalysisResult(success=True, analysis=text, summary="Analysis completed successfully")
