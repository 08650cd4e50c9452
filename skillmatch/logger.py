"""
Structured logging for SkillMatch.

Provides centralized logging with console and file outputs, plus
counters describing a scoring run (pairs scored, match kinds, ontology
lookups) for the end-of-run summary.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics describing a batch scoring run.
    """

    def __init__(
        self,
        name: str = "skillmatch",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (no file output when None)
            enable_file: Write logs to file when log_dir is given
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        # Batches may score pairs on worker threads
        self._lock = threading.Lock()
        self.metrics = {
            "pairs_scored": 0,
            "pairs_failed": 0,
            "skills_scored": 0,
            "exact_matches": 0,
            "related_matches": 0,
            "unmatched_skills": 0,
            "ontology_lookups": 0,
            "ontology_loads": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file and log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"skillmatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if not self.logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_ontology_load(self):
        """Increment ontology load counter."""
        with self._lock:
            self.metrics["ontology_loads"] += 1

    def record_ontology_lookup(self):
        """Count one super/sub-class neighborhood lookup."""
        with self._lock:
            self.metrics["ontology_lookups"] += 1

    def record_skill_score(self, kind: str):
        """Record the outcome of one required skill ("exact", "none", or a related kind)."""
        with self._lock:
            self.metrics["skills_scored"] += 1
            if kind == "exact":
                self.metrics["exact_matches"] += 1
            elif kind == "none":
                self.metrics["unmatched_skills"] += 1
            else:
                self.metrics["related_matches"] += 1

    def record_pair_scored(self):
        """Record a successfully scored offer/candidate pair."""
        with self._lock:
            self.metrics["pairs_scored"] += 1

    def record_pair_failure(self, error_type: str):
        """Record a pair that could not be scored."""
        with self._lock:
            self.metrics["pairs_failed"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return current metrics, with the exact-match rate derived."""
        with self._lock:
            metrics_copy = dict(self.metrics)
            metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])

        scored = metrics_copy["skills_scored"]
        metrics_copy["exact_match_rate"] = (
            round(metrics_copy["exact_matches"] / scored, 3) if scored else 0.0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        total_pairs = metrics["pairs_scored"] + metrics["pairs_failed"]
        self.info("=== Scoring Run Metrics ===")
        self.info(f"Pairs: {metrics['pairs_scored']}/{total_pairs} scored")
        self.info(
            f"Skills: {metrics['skills_scored']} "
            f"(exact={metrics['exact_matches']}, related={metrics['related_matches']}, "
            f"none={metrics['unmatched_skills']})"
        )
        self.info(f"Ontology lookups: {metrics['ontology_lookups']}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "skillmatch",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
