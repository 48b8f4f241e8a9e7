"""
Exception Definitions - Custom exceptions for ELIZA Responder
=============================================================

This module defines all custom exceptions used throughout the application.
Rule set defects (missing fallback keyword, undefined synonym classes,
out-of-range group references) get their own branch of the hierarchy so
callers can tell a broken rule set apart from an ordinary reply.
"""


class ElizaError(Exception):
    """
    Base exception for all ELIZA Responder errors.

    All custom exceptions in this application inherit from this base class,
    allowing for easy catching of all application-specific errors.

    Attributes:
        message (str): Human-readable error description
        details (dict): Additional error details for debugging
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message with details if present."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(ElizaError):
    """
    Application configuration errors.

    Raised when there are issues with:
    - Unreadable or unparsable configuration files
    - Invalid configuration values
    - Environment variable issues
    """
    pass


class RuleSetError(ElizaError):
    """
    Rule set configuration defects.

    The engine cannot produce a correct reply from a rule set in this
    state, so these are never recovered from inside the engine.
    """
    pass


class MissingFallbackError(RuleSetError):
    """Raised when the rule set has no usable 'xnone' keyword."""
    pass


class EmptyPhraseListError(RuleSetError):
    """Raised when a greeting or farewell is requested from an empty list."""
    pass


class UnknownSynonymError(RuleSetError):
    """
    Raised when a pattern references an undefined synonym class.

    Attributes:
        label (str): The synonym label that could not be resolved
    """

    def __init__(self, label: str, details: dict = None):
        self.label = label
        super().__init__(f"Unknown synonym class: {label}", details)


class GroupReferenceError(RuleSetError):
    """
    Raised when a reassembly template references a group the pattern
    never captured.

    Attributes:
        index (int): The 1-based group index from the template
        available (int): Number of groups actually captured
    """

    def __init__(self, index: int, available: int, details: dict = None):
        self.index = index
        self.available = available
        super().__init__(
            f"Group reference ({index}) out of range, {available} group(s) captured",
            details
        )


class InvalidRuleSetError(RuleSetError):
    """
    Structural rule set errors.

    Raised when there are issues with:
    - Missing or mistyped document fields
    - Negative keyword weights
    - Keywords without decompositions
    - Decompositions without reassembly templates
    """
    pass


class RuleLoadError(ElizaError):
    """
    Rule set loading errors.

    Raised when there are issues with:
    - Missing or unreadable rule files
    - Network failures while fetching rules
    - Malformed JSON or YAML documents
    - Failures persisting a fetched rule set
    """
    pass


class ConversationEndedError(ElizaError):
    """Raised when a turn is attempted on a conversation that has ended."""
    pass
