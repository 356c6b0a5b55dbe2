"""Engine configuration with environment overrides."""

import logging
import os
from dataclasses import dataclass, fields

from .summarizer import MAX_DOC_LINES, MIN_DOC_SENTENCES

logger = logging.getLogger(__name__)


# Environment variable -> EngineConfig field
ENV_OVERRIDES = {
    "IMPLMUNCH_MIN_DOC_SENTENCES": "min_doc_sentences",
    "IMPLMUNCH_MAX_DOC_LINES": "max_doc_lines",
    "IMPLMUNCH_CONTEXT_LINES": "after_context",
    "IMPLMUNCH_SEARCH_TIMEOUT": "search_timeout",
    "IMPLMUNCH_MAX_OUTPUT_BYTES": "max_output_bytes",
    "IMPLMUNCH_SEARCHER": "searcher",
}

SEARCHER_CHOICES = ("auto", "grep", "python")

# Numeric fields where 0 is meaningful; every other numeric field must be positive
ZERO_ALLOWED = {"min_doc_sentences", "after_context"}


@dataclass
class EngineConfig:
    """Bounds and thresholds for a resolution request."""
    min_doc_sentences: int = MIN_DOC_SENTENCES
    max_doc_lines: int = MAX_DOC_LINES
    max_doc_lookback: int = 30
    max_continuation_lines: int = 20
    declaration_window: int = 10
    block_doc_lookback: int = 5

    # Content search
    after_context: int = 1000
    search_timeout: float = 10.0
    max_output_bytes: int = 10 * 1024 * 1024
    searcher: str = "auto"          # "auto" | "grep" | "python"

    @classmethod
    def from_env(cls, environ=None) -> "EngineConfig":
        """Build a config, applying IMPLMUNCH_* environment overrides.

        Unparseable values are logged and the default is kept.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        types = {f.name: type(getattr(config, f.name)) for f in fields(cls)}

        for var, attr in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                value = types[attr](raw)
            except ValueError:
                logger.warning(f"Ignoring {var}={raw!r}: expected {types[attr].__name__}")
                continue
            if isinstance(value, (int, float)) and value < (0 if attr in ZERO_ALLOWED else 1):
                logger.warning(f"Ignoring {var}={raw!r}: value out of range")
                continue
            if attr == "searcher" and value not in SEARCHER_CHOICES:
                logger.warning(f"Ignoring {var}={raw!r}: expected one of {', '.join(SEARCHER_CHOICES)}")
                continue
            setattr(config, attr, value)

        return config
