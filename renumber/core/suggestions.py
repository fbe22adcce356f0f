from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import yaml

DEFAULT_SUGGESTIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "suggestions.yaml"


def load_suggestions(path: Optional[Path] = None) -> List[str]:
    path = path or DEFAULT_SUGGESTIONS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Suggestions file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with 'suggestions'")
    items = raw.get("suggestions")
    if not isinstance(items, list):
        raise ValueError(f"{path.name}: 'suggestions' must be a list")
    suggestions = [str(item).strip() for item in items if item is not None and str(item).strip()]
    if not suggestions:
        raise ValueError(f"{path.name}: 'suggestions' is empty")
    return suggestions


class SuggestionCycler:
    """Walks an ordered suggestion list, wrapping around at the end."""

    def __init__(self, suggestions: Sequence[str], start: int = 0) -> None:
        self._suggestions = list(suggestions)
        self._index = start

    def current(self) -> str:
        if not self._suggestions:
            return ""
        return self._suggestions[self._index % len(self._suggestions)]

    def advance(self) -> str:
        self._index += 1
        return self.current()
