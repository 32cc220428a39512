"""
Prompt Loader - Narrator prompt templates read from text files.

Templates live in category subdirectories (``narrator/`` holds the system,
opening and continue prompts) and are filled with ``str.format``. The
opening and continue templates are checked against the fields the narrator
supplies, so a template that drops the player's state or names a field the
narrator does not know fails when it is loaded rather than mid-round.

A template edited on disk is picked up on the next request. An edit that
breaks a template keeps the last good version in service.
"""

import logging
import re
import string
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

STATE_FIELDS = frozenset({"health", "score", "inventory", "secrets"})

# Fields each formatted template must use; unlisted templates are sent as-is
TEMPLATE_FIELDS: Dict[str, frozenset] = {
    "narrator/opening_prompt.txt": STATE_FIELDS,
    "narrator/continue_prompt.txt": STATE_FIELDS | {"previous_scene", "action"},
}


class TemplateError(ValueError):
    """A prompt template does not fit the fields the narrator supplies"""


def template_fields(text: str) -> set[str]:
    """Names of the ``str.format`` fields used in a template."""
    fields = set()
    for _, field_name, _, _ in string.Formatter().parse(text):
        if field_name is None:
            continue
        # "{inventory[0]}" and "{state.health}" still name one field
        fields.add(re.split(r"[.\[]", field_name, maxsplit=1)[0])
    return fields


def check_template(key: str, text: str) -> None:
    """Raise TemplateError unless the template uses exactly its known fields."""
    expected = TEMPLATE_FIELDS.get(key)
    if expected is None:
        return

    try:
        used = template_fields(text)
    except ValueError as e:
        raise TemplateError(f"Prompt {key} is not a valid template: {e}") from e

    missing = expected - used
    if missing:
        raise TemplateError(f"Prompt {key} is missing {sorted(missing)}")
    unknown = used - expected
    if unknown:
        raise TemplateError(f"Prompt {key} uses unknown fields {sorted(unknown)}")


class PromptLoader:
    """Caches prompt templates and re-reads them when they change on disk."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent / "prompts"

        self.prompts_dir = Path(prompts_dir)
        self._templates: Dict[str, str] = {}
        self._mtimes: Dict[str, float] = {}

        self.load_all()

    def _path(self, key: str) -> Path:
        return self.prompts_dir / key

    def _load(self, key: str) -> str:
        """Read and check one template, recording its modification time."""
        path = self._path(key)
        self._mtimes[key] = path.stat().st_mtime
        text = path.read_text(encoding="utf-8")
        check_template(key, text)
        self._templates[key] = text
        return text

    def get_prompt(self, category: str, filename: str) -> str:
        """
        Get a template by category and filename.

        Raises:
            FileNotFoundError: If the template was never loaded and is not on disk
            TemplateError: If the template was never loaded successfully and
                the file on disk is broken
        """
        key = f"{category}/{filename}"
        path = self._path(key)

        if not path.exists():
            if key in self._templates:
                logger.warning(f"Prompt file deleted, using cached version: {key}")
                return self._templates[key]
            raise FileNotFoundError(f"Prompt file not found: {path}")

        if key not in self._templates:
            return self._load(key)

        if path.stat().st_mtime > self._mtimes.get(key, 0):
            logger.info(f"Hot reloading modified prompt: {key}")
            try:
                self._load(key)
            except TemplateError as e:
                logger.error(f"{e}; keeping the previous version")

        return self._templates[key]

    def load_all(self) -> None:
        """Load every template under the prompts directory."""
        logger.info(f"Loading prompts from: {self.prompts_dir}")
        self._templates.clear()
        self._mtimes.clear()

        if not self.prompts_dir.is_dir():
            logger.warning(f"Prompts directory does not exist: {self.prompts_dir}")
            return

        for path in sorted(self.prompts_dir.glob("*/*.txt")):
            key = f"{path.parent.name}/{path.name}"
            try:
                self._load(key)
            except (OSError, TemplateError) as e:
                logger.error(f"Failed to load prompt {key}: {e}")

        logger.info(f"Loaded {len(self._templates)} prompt file(s)")


# Global instance - created on first use
_loader: Optional[PromptLoader] = None


def get_loader() -> PromptLoader:
    """Get the global prompt loader instance."""
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader
