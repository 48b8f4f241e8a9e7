"""
Conversation - Per-session state on top of a shared engine
==========================================================

An engine is stateless; a Conversation tracks whether one session is
still active and ends it after the first farewell.
"""

from enum import Enum

from core.exceptions import ConversationEndedError
from core.logging import get_logger
from rules.engine import Engine, Response

logger = get_logger("services.conversation")


class ConversationState(Enum):
    """Lifecycle states of a conversation."""
    ACTIVE = "active"
    ENDED = "ended"


class Conversation:
    """
    One conversation with the engine.

    Example:
        conversation = Conversation(engine)
        print(conversation.start())

        while conversation.is_active:
            print(conversation.reply(input("> ")).message)
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.state = ConversationState.ACTIVE
        self.turns = 0

    @property
    def is_active(self) -> bool:
        return self.state is ConversationState.ACTIVE

    def start(self) -> str:
        """Return an opening line."""
        return self.engine.greeting()

    def reply(self, text: str) -> Response:
        """
        Run one turn, ending the conversation on a farewell.

        Raises:
            ConversationEndedError: If the conversation has already ended
        """
        if not self.is_active:
            raise ConversationEndedError("The conversation has already ended")

        response = self.engine.interact(text)
        self.turns += 1

        if response.is_farewell:
            self.state = ConversationState.ENDED
            logger.info(f"Conversation ended after {self.turns} turn(s)")

        return response
