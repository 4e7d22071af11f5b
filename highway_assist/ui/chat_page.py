"""NiceGUI chat page over the streaming chat consumer."""

from nicegui import ui

from highway_assist.chat import StreamingChatConsumer, analysis_announcement
from highway_assist.errors import AssistError, InputValidationError
from highway_assist.llm import ModelRegistry
from highway_assist.models import (
    ConversationMessage,
    DocumentRecord,
    DocumentStatus,
    GenerationParams,
    Role,
)
from highway_assist.services import get_ollama_client, get_tracker
from highway_assist.ui.theme import CUSTOM_CSS, nav_header


@ui.page("/")
async def chat_page() -> None:
    """Chat with a local model."""
    ui.add_head_html(CUSTOM_CSS)

    client = get_ollama_client()
    tracker = get_tracker()
    registry = ModelRegistry(client)
    await registry.refresh()
    consumer = StreamingChatConsumer(
        client,
        model=registry.default_model(),
        params=client.config.generation_params(),
        documents=lambda: tracker.documents,
    )
    announced = {d.id for d in tracker.documents if d.status is DocumentStatus.READY}

    bubbles: dict[str, ui.markdown] = {}
    rendered_ids: list[str] = []

    def render_message(msg: ConversationMessage) -> None:
        is_user = msg.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    bubbles[msg.id] = ui.markdown(msg.content or "…").classes("text-sm")
                ui.label(msg.created_at.strftime("%I:%M %p")).classes(
                    "text-[10px] text-gray-400"
                )

    def refresh_messages() -> None:
        bubbles.clear()
        rendered_ids[:] = [m.id for m in consumer.messages]
        messages_container.clear()
        with messages_container:
            if not consumer.messages:
                with ui.column().classes("w-full h-64 items-center justify-center"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Ask about highway design, IRC codes or your documents").classes(
                        "text-gray-400"
                    )
            for msg in consumer.messages:
                render_message(msg)

    def on_conversation_change(messages: list[ConversationMessage]) -> None:
        if [m.id for m in messages] != rendered_ids:
            refresh_messages()
        elif messages and messages[-1].id in bubbles:
            bubbles[messages[-1].id].set_content(messages[-1].content or "…")
        stop_btn.set_visibility(consumer.is_streaming)

    def on_documents_change(documents: list[DocumentRecord]) -> None:
        for record in documents:
            if record.status is DocumentStatus.READY and record.id not in announced:
                announced.add(record.id)
                consumer.announce(analysis_announcement(record))
        ready = sum(1 for d in documents if d.status is DocumentStatus.READY)
        documents_label.set_text(f"{ready} document(s) in context")

    def render_status() -> None:
        status_row.clear()
        with status_row:
            color = "green" if registry.healthy else "red"
            ui.badge("Ollama online" if registry.healthy else "Ollama offline", color=color)
            selected = model_select.value
            if selected in registry.working:
                working = registry.working[selected]
                ui.badge(
                    "Model OK" if working else "Model failed",
                    color="green" if working else "orange",
                )
            if registry.error:
                ui.label(registry.error).classes("text-xs text-red-200")

    async def test_selected_model() -> None:
        if not model_select.value or not registry.healthy:
            return
        if not await registry.check_model(model_select.value):
            ui.notify(f"Model {model_select.value} did not answer a test prompt", type="warning")
        render_status()

    async def refresh_models() -> None:
        await registry.refresh()
        names = [o.name for o in registry.options]
        selected = model_select.value if model_select.value in names else registry.default_model()
        model_select.set_options(names, value=selected)
        render_status()
        await test_selected_model()

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip():
            return
        if not registry.healthy:
            ui.notify("Ollama server is not reachable", type="warning")
            return

        error_banner.set_visibility(False)
        input_field.value = ""
        params = GenerationParams(
            temperature=temperature.value, max_length=int(max_length.value or 2048)
        )
        try:
            await consumer.send(
                text, model=model_select.value, params=params, stream=not debug_mode.value
            )
        except InputValidationError as e:
            input_field.value = text
            ui.notify(str(e), type="warning")
        except AssistError as e:
            input_field.value = consumer.failed_text or text
            error_label.set_text(str(e))
            error_banner.set_visibility(True)
            ui.notify(str(e), type="negative")

    def new_chat() -> None:
        consumer.clear()
        error_banner.set_visibility(False)

    # === UI Layout ===
    nav_header("Highway Assist Chat")
    with ui.column().classes("w-full max-w-3xl mx-auto app-container p-4 gap-3"):
        with ui.row().classes("w-full items-center gap-3"):
            model_select = ui.select(
                [o.name for o in registry.options],
                value=consumer.model,
                label="Model",
                on_change=test_selected_model,
            ).classes("min-w-[220px]")
            ui.button(icon="refresh", on_click=refresh_models).props("flat round")
            ui.button(icon="science", on_click=test_selected_model).props("flat round").tooltip(
                "Test model"
            )
            status_row = ui.row().classes("items-center gap-2")
            documents_label = ui.label().classes("text-xs text-gray-500")
            ui.space()
            ui.button(icon="add", on_click=new_chat).props("flat round").tooltip("New chat")

        with ui.expansion("Generation settings").classes("w-full"):
            temperature = ui.slider(min=0.0, max=1.0, step=0.1, value=consumer.params.temperature)
            ui.label().bind_text_from(temperature, "value", lambda v: f"Temperature: {v:.1f}")
            max_length = ui.number("Max length", value=consumer.params.max_length, min=1)
            debug_mode = ui.switch("Debug mode (non-streaming)")

        with ui.row().classes("w-full bg-red-100 rounded px-3 py-2") as error_banner:
            error_label = ui.label().classes("text-red-700 text-sm flex-grow")
            ui.button(icon="close", on_click=lambda: error_banner.set_visibility(False)).props(
                "flat dense round"
            )
        error_banner.set_visibility(False)

        with ui.scroll_area().classes("w-full h-[55vh] bg-gray-50 rounded"):
            messages_container = ui.column().classes("w-full p-4 gap-3")

        with ui.row().classes("w-full items-end gap-2"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            ui.button(icon="send", on_click=send_message).props("round unelevated")
            stop_btn = ui.button(icon="stop", on_click=consumer.cancel).props(
                "round unelevated color=negative"
            )
            stop_btn.set_visibility(False)

    render_status()
    refresh_messages()
    on_documents_change(tracker.documents)
    unsubscribe = consumer.subscribe(on_conversation_change)
    unsubscribe_documents = tracker.subscribe(on_documents_change)

    def on_disconnect() -> None:
        consumer.cancel()
        unsubscribe()
        unsubscribe_documents()

    ui.context.client.on_disconnect(on_disconnect)
