"""Document grounding for chat requests.

Ready documents are folded into a single system message placed ahead of the
conversation, so the model can answer questions about uploaded schedules and
their analysis. Records in any other state are left out.
"""

from collections.abc import Iterable

from highway_assist.models import ConversationMessage, DocumentRecord, DocumentStatus, DocumentType, Role

CONTEXT_HEADER = (
    "You have access to the following highway engineering documents with AI "
    "analysis. Please reference them when answering questions:"
)
DOCUMENT_SEPARATOR = "\n\n---\n\n"


def _describe(record: DocumentRecord) -> str:
    lines = [f"Document: {record.name}", "Content:", record.content]
    analysis = record.analysis
    if analysis is not None and analysis.success:
        lines += ["", "AI Analysis:", analysis.analysis or ""]
        if analysis.compliance_score is not None:
            lines.append(f"Compliance Score: {analysis.compliance_score}/100")
        if analysis.issues:
            lines.append(f"Issues: {', '.join(analysis.issues)}")
        if analysis.recommendations:
            lines.append(f"Recommendations: {' | '.join(analysis.recommendations)}")
    return "\n".join(lines)


def document_context(records: Iterable[DocumentRecord]) -> ConversationMessage | None:
    """Build the system preamble for the Ready documents, if there are any."""
    ready = [r for r in records if r.status is DocumentStatus.READY]
    if not ready:
        return None
    body = DOCUMENT_SEPARATOR.join(_describe(r) for r in ready)
    return ConversationMessage(
        role=Role.SYSTEM, content=f"{CONTEXT_HEADER}\n\n{body}", finalized=True
    )


def _score_marker(score: int) -> str:
    if score >= 80:
        return "🟢"
    if score >= 60:
        return "🟡"
    return "🔴"


def analysis_announcement(record: DocumentRecord) -> str:
    """Chat notice posted once a document has finished processing."""
    kind = (
        "Highway engineering document"
        if record.document_type is DocumentType.HIGHWAY
        else "Engineering document"
    )
    text = f'📄 {kind} "{record.name}" has been uploaded and processed.'

    analysis = record.analysis
    if analysis is None or not analysis.success:
        return text + "\n\nYou can now ask questions about its content."

    text += "\n\n🤖 **AI Analysis Complete:**"
    if analysis.compliance_score is not None:
        score = analysis.compliance_score
        text += f"\n{_score_marker(score)} Compliance Score: {score}/100"
    if analysis.summary:
        text += f"\n📋 Summary: {analysis.summary}"
    if analysis.issues:
        text += f"\n⚠️ Issues Found: {len(analysis.issues)}"
    if analysis.recommendations:
        text += f"\n💡 Recommendations Available: {len(analysis.recommendations)}"
    return text + "\n\nYou can now ask questions about the highway engineering analysis and compliance!"
