"""
Session-based LLM interaction logger.

Creates human-readable log files for each adventure session with
clearly separated narrator interactions, including rounds where the
narrator failed and a fallback scene was substituted.

Set SESSION_LOGS_DIR to choose the directory; set it to an empty
string to disable session logs entirely.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from adventure.models.cue import Cue


# Relative to the working directory the server is started from
DEFAULT_LOGS_DIR = Path("logs")


def get_logs_dir() -> Path | None:
    """Directory for session log files, or None when disabled."""
    configured = os.getenv("SESSION_LOGS_DIR")
    if configured is None:
        return DEFAULT_LOGS_DIR
    if not configured.strip():
        return None
    return Path(configured)


class SessionLogger:
    """Logs narrator interactions for a session to a dedicated file."""

    def __init__(self, session_id: str, logs_dir: Path):
        self.session_id = session_id
        self.logs_dir = logs_dir
        self.interaction_count = 0
        self.log_file: Path | None = None

    def _ensure_log_file(self) -> Path:
        """Create the log file on first interaction."""
        if self.log_file is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)

            # Use timestamp of first interaction in filename
            started = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            self.log_file = self.logs_dir / f"{started}_{self.session_id}.log"

            with open(self.log_file, "w", encoding="utf-8") as f:
                f.write("Adventure Session Log\n")
                f.write("=====================\n")
                f.write(f"Session ID: {self.session_id}\n")
                f.write(f"Started: {datetime.now().isoformat()}\n")
                f.write("\n")

        return self.log_file

    def log_interaction(
        self,
        system_prompt: str,
        user_prompt: str,
        narrative: str,
        model: str,
        cues: list[Cue],
        error: str | None = None,
    ) -> None:
        """Log one narrator round to the session file."""
        log_file = self._ensure_log_file()
        self.interaction_count += 1

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        with open(log_file, "a", encoding="utf-8") as f:
            f.write("═" * 70 + "\n")
            f.write(
                f"NARRATOR INTERACTION #{self.interaction_count} | {timestamp} | {model}\n"
            )
            f.write("═" * 70 + "\n\n")

            f.write("─── SYSTEM PROMPT ───\n")
            f.write(system_prompt)
            f.write("\n\n")

            f.write("─── USER PROMPT ───\n")
            f.write(user_prompt)
            f.write("\n\n")

            if error:
                f.write("─── NARRATOR FAILED (fallback used) ───\n")
                f.write(error)
                f.write("\n\n")

            f.write("─── NARRATIVE ───\n")
            f.write(narrative or "(empty)")
            f.write("\n\n")

            f.write("─── CUES ───\n")
            if cues:
                for cue in cues:
                    details = ", ".join(
                        f"{key}={value!r}"
                        for key, value in cue.model_dump(exclude={"kind"}).items()
                    )
                    f.write(f"  {cue.kind.value}: {details}\n")
            else:
                f.write("  (none)\n")
            f.write("\n")


# Global registry of session loggers
_session_loggers: dict[str, SessionLogger] = {}


def get_session_logger(session_id: str) -> SessionLogger | None:
    """Get or create the logger for a session (None when logging is disabled)."""
    logs_dir = get_logs_dir()
    if logs_dir is None:
        return None
    if session_id not in _session_loggers:
        _session_loggers[session_id] = SessionLogger(session_id, logs_dir)
    return _session_loggers[session_id]


def log_narrator_interaction(
    session_id: str,
    system_prompt: str,
    user_prompt: str,
    narrative: str,
    model: str,
    cues: list[Cue],
    error: str | None = None,
) -> None:
    """Convenience function to log a narrator interaction."""
    session_logger = get_session_logger(session_id)
    if session_logger is None:
        return
    session_logger.log_interaction(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        narrative=narrative,
        model=model,
        cues=cues,
        error=error,
    )
