"""NiceGUI page for uploading documents and following their analysis."""

from nicegui import background_tasks, events, ui

from highway_assist.documents import format_file_size
from highway_assist.errors import InputValidationError
from highway_assist.models import DocumentRecord, DocumentStatus, UploadedFile
from highway_assist.services import get_tracker
from highway_assist.ui.theme import CUSTOM_CSS, STATUS_COLORS, nav_header


def render_document(record: DocumentRecord, on_remove) -> None:
    with ui.card().classes("w-full"):
        with ui.row().classes("w-full items-center gap-3"):
            ui.icon("picture_as_pdf").classes("text-2xl text-red-600")
            with ui.column().classes("gap-0 flex-grow"):
                ui.label(record.name).classes("font-medium")
                ui.label(
                    f"{format_file_size(record.size)} · {record.document_type.value}"
                ).classes("text-xs text-gray-500")
            ui.badge(record.status.value, color=STATUS_COLORS[record.status.value])
            ui.button(icon="delete", on_click=lambda: on_remove(record.id)).props(
                "flat round dense"
            )

        if not record.is_terminal:
            ui.linear_progress(value=(record.progress or 0) / 100, show_value=False)
            ui.label(record.status_text).classes("text-xs text-gray-500")

        if record.status is DocumentStatus.ERROR:
            ui.label(record.error_message or "Analysis failed").classes("text-sm text-red-600")

        analysis = record.analysis
        if analysis is not None:
            if analysis.summary:
                ui.label(analysis.summary).classes("text-sm")
            if analysis.compliance_score is not None:
                ui.label(f"Compliance score: {analysis.compliance_score}%").classes(
                    "text-sm font-semibold"
                )
            if analysis.issues:
                with ui.expansion(f"Issues ({len(analysis.issues)})"):
                    for issue in analysis.issues:
                        ui.label(issue).classes("text-sm")
            if analysis.recommendations:
                with ui.expansion(f"Recommendations ({len(analysis.recommendations)})"):
                    for rec in analysis.recommendations:
                        ui.label(rec).classes("text-sm")
            if analysis.analysis:
                with ui.expansion("Full analysis"):
                    ui.markdown(analysis.analysis)


@ui.page("/documents")
def documents_page() -> None:
    """Schedule B & C document checker."""
    ui.add_head_html(CUSTOM_CSS)
    tracker = get_tracker()

    def remove(document_id: str) -> None:
        tracker.remove(document_id)

    @ui.refreshable
    def summary() -> None:
        counts = tracker.counts()
        in_flight = counts[DocumentStatus.PROCESSING] + counts[DocumentStatus.ANALYZING]
        with ui.row().classes("gap-4"):
            ui.label(f"Total: {len(tracker.documents)}")
            ui.label(f"Ready: {counts[DocumentStatus.READY]}")
            ui.label(f"In progress: {in_flight}")
            ui.label(f"Failed: {counts[DocumentStatus.ERROR]}")

    @ui.refreshable
    def document_list() -> None:
        if not tracker.documents:
            ui.label("No documents yet. Upload a Schedule B or C PDF to start.").classes(
                "text-gray-400"
            )
        for record in tracker.documents:
            render_document(record, remove)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        upload = UploadedFile(
            name=e.file.name,
            mime_type=e.file.content_type,
            content=await e.file.read(),
        )
        try:
            record = tracker.accept(upload)
        except InputValidationError as err:
            ui.notify(f"{upload.name}: {err}", type="negative", close_button=True)
            return
        background_tasks.create(tracker.process(record.id), name=f"analyze-{record.id}")

    def on_documents_change(_: list[DocumentRecord]) -> None:
        summary.refresh()
        document_list.refresh()

    nav_header("Schedule B & C Checker")
    with ui.column().classes("w-full max-w-4xl mx-auto app-container p-4 gap-4"):
        ui.label("PDF highway engineering documents (Schedule B & C sections)").classes(
            "text-gray-600"
        )
        ui.upload(
            label=f"Drop PDFs here (max {format_file_size(tracker.max_file_size)})",
            on_upload=handle_upload,
            multiple=True,
            auto_upload=True,
        ).props("accept=.pdf").classes("w-full")
        summary()
        with ui.column().classes("w-full gap-3"):
            document_list()

    unsubscribe = tracker.subscribe(on_documents_change)
    ui.context.client.on_disconnect(unsubscribe)
