import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidInputError

DEFAULT_ONTOLOGY = "software-engineering.ontology.owl"
DEFAULT_NAMESPACE = "http://www.semanticweb.org/mcastro/ontologies/2018/5/software-engineering-ontology#"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True)
class Settings:
    ontology: str = DEFAULT_ONTOLOGY
    # Empty string disables namespace filtering
    namespace: str = DEFAULT_NAMESPACE
    policy: str = "accumulate"
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    fetch_timeout: float = 15.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from SKILLMATCH_* environment variables.

        Raises:
            InvalidInputError: for an unknown log level or a non-positive/non-numeric timeout
        """
        return cls(
            ontology=os.getenv("SKILLMATCH_ONTOLOGY", DEFAULT_ONTOLOGY),
            namespace=os.getenv("SKILLMATCH_NAMESPACE", DEFAULT_NAMESPACE),
            policy=os.getenv("SKILLMATCH_POLICY", "accumulate").strip().lower(),
            log_level=parse_log_level(os.getenv("SKILLMATCH_LOG_LEVEL", "INFO")),
            log_dir=Path(os.getenv("SKILLMATCH_LOG_DIR", "logs")),
            fetch_timeout=_parse_timeout(os.getenv("SKILLMATCH_FETCH_TIMEOUT")),
        )


def parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise InvalidInputError(
            f"Unknown log level '{value}'. Use one of: {', '.join(LOG_LEVELS)}"
        )
    return level


def _parse_timeout(value: str | None) -> float:
    if value is None or not value.strip():
        return 15.0
    try:
        timeout = float(value)
    except ValueError:
        raise InvalidInputError(f"SKILLMATCH_FETCH_TIMEOUT must be a number of seconds, got '{value}'")
    if timeout <= 0:
        raise InvalidInputError(f"SKILLMATCH_FETCH_TIMEOUT must be positive, got '{value}'")
    return timeout
