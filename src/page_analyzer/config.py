from dotenv import load_dotenv
from dataclasses import dataclass, fields
from typing import Optional
import os

from page_analyzer.constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_CONCURRENT_PROBES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)

load_dotenv()  # Loads variables from .env file


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default  # Keep default if conversion fails


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class AnalyzerConfig:
    """Configuration for the page analyzer."""
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES
    analysis_deadline: Optional[float] = None  # Seconds for a whole analysis; None = unbounded
    verify_ssl: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")
        if self.probe_timeout <= 0:
            raise ValueError("probe_timeout must be positive")
        if self.max_concurrent_probes < 1:
            raise ValueError("max_concurrent_probes must be at least 1")
        if self.analysis_deadline is not None and self.analysis_deadline <= 0:
            raise ValueError("analysis_deadline must be positive")

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Load configuration from environment variables.

        Returns:
            AnalyzerConfig: Configuration instance with values from environment
        """
        return cls(
            user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
            fetch_timeout=_env_float("FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT_SECONDS),
            probe_timeout=_env_float("PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT_SECONDS),
            max_concurrent_probes=_env_int("MAX_CONCURRENT_PROBES", DEFAULT_MAX_CONCURRENT_PROBES),
            analysis_deadline=_env_float("ANALYSIS_DEADLINE", None),
            verify_ssl=_env_bool("VERIFY_SSL", True),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary.

        Returns:
            Dictionary of all configuration values
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}
