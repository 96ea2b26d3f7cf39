"""Error taxonomy for spec normalization and code generation.

Both error families are terminal for the current request; nothing in the
core retries. Callers may retry a ``fetch`` failure themselves.
"""

from __future__ import annotations

PARSE_REASONS = frozenset({
    "syntax",
    "fetch",
    "unresolvable-reference",
    "schema",
    "duplicate-endpoint",
})

GENERATION_REASONS = frozenset({
    "no-tools-selected",
    "invalid-identifier",
    "duplicate-tool-name",
})


class MakeMcpError(Exception):
    """Base class carrying a machine-readable ``reason``."""

    reasons: frozenset[str] = frozenset()

    def __init__(self, reason: str, message: str = "") -> None:
        if reason not in self.reasons:
            raise ValueError(f"unknown {type(self).__name__} reason: {reason!r}")
        self.reason = reason
        self.message = message or reason
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.reason}: {self.message}" if self.message != self.reason else self.reason


class ParseError(MakeMcpError):
    """Raised when an API description cannot be normalized."""

    reasons = PARSE_REASONS


class GenerationError(MakeMcpError):
    """Raised when a tool set cannot be turned into a file set."""

    reasons = GENERATION_REASONS

    @property
    def is_client_error(self) -> bool:
        # Every current reason is a problem with the caller's selection or edits.
        return self.reason in GENERATION_REASONS
