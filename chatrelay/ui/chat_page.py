"""NiceGUI chat interface streaming replies from the relay endpoint."""

import os
from functools import partial

from nicegui import app, ui

from chatrelay.ui.client import relay_reply
from chatrelay.ui.export import ExportFormat, export_conversation
from chatrelay.ui.state import (
    ACCENT_COLORS,
    FONT_SIZES,
    REACTION_EMOJIS,
    ChatState,
    StateStore,
    StoredTurn,
    clear_conversation,
    edit_turn,
    resend_turn,
    set_accent,
    set_font_size,
    submit_message,
    toggle_reaction,
    toggle_theme,
)
from chatrelay.ui.storage import ChatStorage

STORAGE_SECRET = os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret")

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    .app-container {
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .message-user {
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant { border-radius: 18px 18px 18px 4px; }
    .body--light .message-assistant { background: #f3f4f6; color: #1f2937; }
    .body--dark .message-assistant { background: #262626; color: #f5f5f5; }

    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9ca3af;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .message-assistant pre { margin: 0.5rem 0; overflow-x: auto; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


def accent_gradient(state: ChatState) -> str:
    start, end = ACCENT_COLORS[state.settings.accent]
    return f"background: linear-gradient(135deg, {start} 0%, {end} 100%)"


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    storage = ChatStorage(app.storage.user)
    store = StateStore(storage.load())
    store.subscribe(storage.save)
    dark = ui.dark_mode(store.state.settings.theme == "dark")

    messages_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.textarea
    send_btn: ui.button
    reply_view: ui.markdown | None = None

    def render_avatar(is_user: bool) -> None:
        icon = "person" if is_user else "smart_toy"
        avatar = ui.element("div").classes(
            "w-9 h-9 rounded-full flex items-center justify-center"
        )
        if is_user:
            avatar.style(accent_gradient(store.state))
        else:
            avatar.classes("avatar-assistant")
        with avatar:
            ui.icon(icon).classes("text-white text-lg")

    def render_typing_indicator() -> None:
        with ui.row().classes("gap-1 py-1"):
            for _ in range(3):
                ui.element("div").classes("typing-dot")

    def render_actions(index: int, turn: StoredTurn) -> None:
        with ui.row().classes("gap-0 items-center"):
            ui.button(icon="content_copy", on_click=lambda: copy_message(turn.content)).props(
                "flat round dense size=sm color=grey"
            )
            if turn.role == "user":
                ui.button(icon="edit", on_click=lambda: open_editor(index)).props(
                    "flat round dense size=sm color=grey"
                )
            else:
                with ui.button(icon="add_reaction").props("flat round dense size=sm color=grey"):
                    with ui.menu(), ui.row().classes("p-1 gap-1"):
                        for emoji in REACTION_EMOJIS:
                            ui.button(
                                emoji, on_click=partial(react, index, emoji)
                            ).props("flat dense")
            for emoji in turn.reactions:
                ui.button(emoji, on_click=partial(react, index, emoji)).props(
                    "flat dense rounded size=sm"
                )

    def render_message(index: int, turn: StoredTurn) -> None:
        nonlocal reply_view
        is_user = turn.role == "user"
        align = "justify-end" if is_user else "justify-start"
        in_flight = store.state.is_streaming and index == len(store.state.messages) - 1

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                bubble = ui.element("div").classes("px-4 py-3")
                if is_user:
                    bubble.classes("message-user").style(accent_gradient(store.state))
                else:
                    bubble.classes("message-assistant")
                with bubble:
                    if in_flight and not turn.content:
                        render_typing_indicator()
                    view = ui.markdown(turn.content).classes(
                        f"{store.state.settings.font_size} leading-relaxed"
                    )
                    if in_flight:
                        reply_view = view
                with ui.row().classes("items-center gap-2"):
                    ui.label(turn.created_at.astimezone().strftime("%I:%M %p")).classes(
                        "text-[10px] text-gray-400"
                    )
                    if not in_flight:
                        render_actions(index, turn)
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        nonlocal reply_view
        reply_view = None
        messages_container.clear()
        with messages_container:
            if not store.state.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
            else:
                for index, turn in enumerate(store.state.messages):
                    render_message(index, turn)
        scroll_area.scroll_to(percent=1.0)

    async def stream_reply() -> None:
        send_btn.disable()
        refresh_messages()

        def on_fragment(text: str) -> None:
            first = store.state.messages[-1].content == text
            if first or reply_view is None:
                refresh_messages()
            else:
                reply_view.set_content(store.state.messages[-1].content)
                scroll_area.scroll_to(percent=1.0)

        def on_failure() -> None:
            ui.notify("Failed to send message", type="negative")

        try:
            await relay_reply(store, on_fragment, on_failure)
        finally:
            send_btn.enable()
            refresh_messages()

    async def send_message() -> None:
        text = input_field.value or ""
        before = store.state
        store.apply(submit_message, text)
        if store.state is before:
            return
        input_field.value = ""
        await stream_reply()

    async def resend(index: int) -> None:
        before = store.state
        store.apply(resend_turn, index)
        if store.state is not before:
            await stream_reply()

    def react(index: int, emoji: str) -> None:
        store.apply(toggle_reaction, index, emoji)
        refresh_messages()

    def copy_message(text: str) -> None:
        ui.clipboard.write(text)
        ui.notify("Message copied to clipboard", type="positive")

    def open_editor(index: int) -> None:
        with ui.dialog() as dialog, ui.card().classes("w-[32rem]"):
            ui.label("Edit message").classes("text-lg font-semibold")
            editor = ui.textarea(value=store.state.messages[index].content).props(
                "autogrow outlined"
            ).classes("w-full")

            def save() -> None:
                store.apply(edit_turn, index, editor.value or "")
                dialog.close()
                refresh_messages()
                ui.notify("Message updated", type="positive")

            async def save_and_resend() -> None:
                store.apply(edit_turn, index, editor.value or "")
                dialog.close()
                await resend(index)

            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button("Save", on_click=save).props("flat")
                ui.button("Save & resend", on_click=save_and_resend).props("unelevated")
        dialog.open()

    def confirm_clear() -> None:
        with ui.dialog() as dialog, ui.card():
            with ui.row().classes("items-center gap-3"):
                ui.icon("warning").classes("text-2xl text-amber-500")
                ui.label("Clear Chat History").classes("text-lg font-semibold")
            ui.label(
                "This will permanently delete all messages in this conversation. "
                "This action cannot be undone."
            )

            def clear() -> None:
                store.apply(clear_conversation)
                dialog.close()
                refresh_messages()
                ui.notify("Chat cleared successfully", type="positive")

            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button("Clear All", on_click=clear).props("unelevated color=negative")
        dialog.open()

    def open_settings() -> None:
        with ui.dialog() as dialog, ui.card().classes("w-96"):
            ui.label("Chat Settings").classes("text-xl font-bold")
            ui.select(
                {name: name.capitalize() for name in ACCENT_COLORS},
                label="Accent Color",
                value=store.state.settings.accent,
                on_change=lambda e: store.apply(set_accent, e.value),
            ).classes("w-full")
            ui.select(
                FONT_SIZES,
                label="Font Size",
                value=store.state.settings.font_size,
                on_change=lambda e: store.apply(set_font_size, e.value),
            ).classes("w-full")

            def save() -> None:
                dialog.close()
                refresh_messages()
                ui.notify("Settings saved successfully", type="positive")

            ui.button("Save Changes", on_click=save).props("unelevated").classes("w-full")
        dialog.open()

    def switch_theme() -> None:
        store.apply(toggle_theme)
        dark.set_value(store.state.settings.theme == "dark")

    def download(fmt: ExportFormat) -> None:
        filename, content = export_conversation(store.state.messages, fmt)
        ui.download(content.encode("utf-8"), filename)
        ui.notify(f"Chat exported as {fmt.upper()}", type="positive")

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        header = ui.row().classes("w-full px-5 py-4 items-center justify-between")
        header.style(accent_gradient(store.state))
        with header:
            with ui.row().classes("items-center gap-3"):
                ui.icon("smart_toy").classes("text-white text-3xl")
                ui.label("AI Assistant").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-1"):
                ui.button(icon="brightness_6", on_click=switch_theme).props(
                    "flat round color=white"
                )
                ui.button(icon="settings", on_click=open_settings).props(
                    "flat round color=white"
                )
                with ui.button(icon="download").props("flat round color=white"):
                    with ui.menu():
                        ui.menu_item("Export TXT", on_click=lambda: download("txt"))
                        ui.menu_item("Export JSON", on_click=lambda: download("json"))
                ui.button(icon="delete", on_click=confirm_clear).props(
                    "flat round color=white"
                )

        # Messages
        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            messages_container = ui.column().classes("w-full p-5 gap-4")
        refresh_messages()

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end border-t"):
            input_field = (
                ui.textarea(placeholder="Type your message... (Shift+Enter for new line)")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.exact.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props(
                "round unelevated"
            )
            send_btn.style(accent_gradient(store.state))


def main() -> None:
    """Serve the page on its own, talking to the relay at API_BASE_URL."""
    ui.run(
        title="AI Assistant",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
        show=False,
        storage_secret=STORAGE_SECRET,
    )


if __name__ == "__main__":
    main()
