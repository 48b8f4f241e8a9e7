"""
Textual Application - Chat TUI
==============================

This module implements a Textual chat screen for ELIZA Responder:
a scrolling transcript above a single input line.
"""

from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Header, Footer, Static, Input
from textual.binding import Binding

from core.config import Config, load_config
from core.logging import get_logger
from services.conversation import Conversation
from services.responder import ElizaResponder

logger = get_logger("tui.app")


class TranscriptWidget(VerticalScroll):
    """Scrolling list of conversation lines."""

    def add_line(self, speaker: str, text: str) -> None:
        classes = "line-user" if speaker == "you" else "line-eliza"
        self.mount(Static(f"{speaker}: {text}", classes=classes))
        self.scroll_end(animate=False)


class ElizaApp(App):
    """Terminal chat with the responder's current engine."""

    TITLE = "ELIZA"

    CSS = """
    Screen {
        background: $surface;
    }

    TranscriptWidget {
        height: 1fr;
        padding: 0 1;
    }

    .line-user {
        color: $text-muted;
        margin: 1 0 0 0;
    }

    .line-eliza {
        color: $accent;
    }

    Input {
        dock: bottom;
        margin: 0 0 1 0;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("escape", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: Optional[Config] = None,
        responder: Optional[ElizaResponder] = None
    ):
        super().__init__()

        self.config = config or load_config()
        self.responder = responder or ElizaResponder.from_config(self.config)
        self.conversation: Optional[Conversation] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield TranscriptWidget(id="transcript")
        yield Input(placeholder="Say something...", id="chat-input")
        yield Footer()

    def on_mount(self) -> None:
        transcript = self.query_one("#transcript", TranscriptWidget)
        engine = self.responder.engine

        if engine is None:
            transcript.add_line("eliza", "Error: no rules defined")
            self.query_one("#chat-input", Input).disabled = True
            return

        self.conversation = Conversation(engine)
        transcript.add_line("eliza", self.conversation.start())
        self.query_one("#chat-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run one turn for the submitted line."""
        text = event.value.strip()
        event.input.value = ""

        if not text or self.conversation is None:
            return

        transcript = self.query_one("#transcript", TranscriptWidget)
        transcript.add_line("you", text)

        response = self.conversation.reply(text)
        transcript.add_line("eliza", response.message)

        if response.is_farewell:
            event.input.disabled = True
            self.notify("Conversation ended. Press Esc to exit.", title="Goodbye")

    def action_quit(self) -> None:
        self.exit()


def run_tui(config: Optional[Config] = None) -> None:
    app = ElizaApp(config=config)
    app.run()


if __name__ == "__main__":
    run_tui()
