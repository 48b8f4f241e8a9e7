"""
ELIZA Responder - Engine holder and chat command handling
=========================================================

This module owns the engine a front end talks to. It provides:
- Thread-safe access to the current engine
- Replacing the rule set at runtime (whole-engine swap)
- Persisting fetched rule sets so they survive restarts
- Chat commands (!load_rules, !ping) on top of ordinary turns
"""

import random
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from core.config import Config
from core.exceptions import RuleLoadError, RuleSetError
from core.logging import get_logger
from rules.engine import Chooser, Engine
from rules.loader import default_rules_path, fetch_rules, load_rules, save_rules
from rules.models import RuleSet

logger = get_logger("services.responder")


LOAD_RULES_COMMAND = "!load_rules"
PING_COMMAND = "!ping"

NO_RULES_MESSAGE = "Error: no rules defined"
LOAD_OK_MESSAGE = "OK!"
LOAD_FAILED_MESSAGE = "Error loading rules.. Please check your URL."
STORE_FAILED_MESSAGE = "Internal error.."
PONG_MESSAGE = "Pong!"


@dataclass
class ResponderResult:
    """
    Result of handling one incoming message.

    Attributes:
        response (str): Text to send back
        source (str): 'eliza', 'command' or 'error'
        is_farewell (bool): True when the message ended the conversation
        keyword (str): Keyword that produced the reply, if any
        latency_ms (int): Handling time
    """
    response: str
    source: str
    is_farewell: bool = False
    keyword: Optional[str] = None
    latency_ms: int = 0


class ElizaResponder:
    """
    Holds the active engine and answers messages with it.

    The engine reference is swapped as a whole under a lock; a turn grabs
    the reference once and runs entirely against that engine, so a reload
    never mixes two rule sets within one reply.

    Example:
        responder = ElizaResponder.from_config(config)

        result = responder.handle_message("I am feeling sad")
        print(result.response)

        responder.handle_message("!load_rules https://example.com/rules.json")
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        storage_path: Optional[Union[str, Path]] = None,
        fetch_timeout: float = 10.0,
        chooser: Optional[Chooser] = None
    ):
        """
        Initialize the responder.

        Args:
            engine: Initial engine (None until rules are loaded)
            storage_path: Where loaded rule sets are persisted (optional)
            fetch_timeout: Timeout for downloading rule sets
            chooser: Phrase chooser handed to engines built here
        """
        self._engine = engine
        self._lock = threading.Lock()
        self.storage_path = Path(storage_path) if storage_path else None
        self.fetch_timeout = fetch_timeout
        self.chooser = chooser

    @classmethod
    def from_config(cls, config: Config) -> "ElizaResponder":
        """
        Create a responder from application configuration.

        A previously persisted rule set takes precedence over the
        configured rules file.
        """
        chooser = None
        if config.engine.seed is not None:
            chooser = random.Random(config.engine.seed).choice

        storage_path = None
        if config.engine.persist_rules and config.data_dir:
            storage_path = Path(config.data_dir) / "rules.json"

        responder = cls(
            storage_path=storage_path,
            fetch_timeout=config.engine.fetch_timeout,
            chooser=chooser
        )

        if storage_path is not None and storage_path.exists():
            source = storage_path
        elif config.engine.rules_path:
            source = Path(config.engine.rules_path)
        else:
            source = default_rules_path()

        responder.swap(responder.build_engine(load_rules(source)))
        logger.info(f"Responder initialized from {source}")
        return responder

    @property
    def engine(self) -> Optional[Engine]:
        with self._lock:
            return self._engine

    @property
    def has_rules(self) -> bool:
        return self.engine is not None

    def swap(self, engine: Engine) -> Optional[Engine]:
        """Install a new engine and return the previous one."""
        with self._lock:
            previous, self._engine = self._engine, engine
        return previous

    def build_engine(self, ruleset: RuleSet) -> Engine:
        """Build an engine with this responder's chooser."""
        return Engine(ruleset, chooser=self.chooser)

    def store(self, ruleset: RuleSet) -> None:
        """Persist a rule set if a storage path is configured."""
        if self.storage_path is not None:
            save_rules(ruleset, self.storage_path)

    def load_from_path(self, path: Union[str, Path]) -> Engine:
        """
        Replace the rule set with one read from a file.

        Raises:
            RuleLoadError: If the file cannot be read, parsed or stored
            RuleSetError: If the rule set is invalid
        """
        return self._install(load_rules(path))

    def load_from_url(self, url: str) -> Engine:
        """
        Replace the rule set with one downloaded from a URL.

        Raises:
            RuleLoadError: If the download, parsing or storing fails
            RuleSetError: If the rule set is invalid
        """
        return self._install(fetch_rules(url, timeout=self.fetch_timeout))

    def _install(self, ruleset: RuleSet) -> Engine:
        engine = self.build_engine(ruleset)
        self.store(ruleset)
        self.swap(engine)
        logger.info(f"Installed rule set with {len(ruleset.keywords)} keywords")
        return engine

    def greeting(self) -> Optional[str]:
        """Opening line from the current engine, None without rules."""
        engine = self.engine
        return engine.greeting() if engine else None

    def respond(self, text: str) -> ResponderResult:
        """
        Run one conversational turn.

        Rule set defects propagate as RuleSetError.

        Args:
            text: Incoming message

        Returns:
            ResponderResult with the reply
        """
        start = time.monotonic()
        engine = self.engine

        if engine is None:
            return ResponderResult(response=NO_RULES_MESSAGE, source="error")

        response = engine.interact(text)

        return ResponderResult(
            response=response.message,
            source="eliza",
            is_farewell=response.is_farewell,
            keyword=response.keyword,
            latency_ms=int((time.monotonic() - start) * 1000)
        )

    def handle_message(self, text: str) -> ResponderResult:
        """
        Dispatch chat commands, or answer the message.

        Commands:
            !load_rules <url>  Download and install a new rule set
            !ping              Liveness check

        Args:
            text: Incoming message

        Returns:
            ResponderResult for the command or the turn
        """
        if LOAD_RULES_COMMAND in text:
            url = text.replace(LOAD_RULES_COMMAND, "").strip()
            return ResponderResult(response=self._load_rules_command(url), source="command")

        if PING_COMMAND in text:
            return ResponderResult(response=PONG_MESSAGE, source="command")

        return self.respond(text.strip())

    def _load_rules_command(self, url: str) -> str:
        logger.info(f"Loading rules from {url}")

        try:
            ruleset = fetch_rules(url, timeout=self.fetch_timeout)
            engine = self.build_engine(ruleset)
        except (RuleLoadError, RuleSetError) as e:
            logger.warning(f"Failed to load rules from {url}: {e}")
            return LOAD_FAILED_MESSAGE

        try:
            self.store(ruleset)
        except RuleLoadError as e:
            logger.error(f"Failed to store new rules: {e}")
            return STORE_FAILED_MESSAGE

        self.swap(engine)
        return LOAD_OK_MESSAGE
