from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from renumber.core.models import Difficulty

DEFAULT_DIFFICULTIES_PATH = Path(__file__).resolve().parent.parent / "data" / "difficulties.yaml"


@dataclass(frozen=True)
class DifficultySettings:
    difficulty: Difficulty
    exposure_seconds: float
    delay_seconds: float
    digit_range: Tuple[int, int]


class DifficultyRepository:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or DEFAULT_DIFFICULTIES_PATH
        self._settings = self._load_settings()

    def all(self) -> List[DifficultySettings]:
        return list(self._settings.values())

    def get(self, difficulty: Difficulty) -> DifficultySettings:
        return self._settings[difficulty]

    def _load_settings(self) -> Dict[Difficulty, DifficultySettings]:
        if not self._path.exists():
            raise FileNotFoundError(f"Difficulty file not found: {self._path}")

        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{self._path.name}: expected a mapping of difficulty names")

        settings: Dict[Difficulty, DifficultySettings] = {}
        # Enum order, not file order, so every consumer lists Easy..Expert.
        for difficulty in Difficulty:
            entry = raw.get(difficulty.value)
            if not isinstance(entry, dict):
                raise ValueError(f"{self._path.name}: missing or invalid '{difficulty.value}'")
            settings[difficulty] = self._parse_entry(difficulty, entry)
        return settings

    def _parse_entry(self, difficulty: Difficulty, entry: dict) -> DifficultySettings:
        name = f"{self._path.name}: {difficulty.value}"
        exposure = entry.get("exposure")
        delay = entry.get("delay")
        digits = entry.get("digits")
        for label, value in (("exposure", exposure), ("delay", delay)):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"{name}: '{label}' must be a positive number")
        if (
            not isinstance(digits, list)
            or len(digits) != 2
            or not all(isinstance(d, int) and not isinstance(d, bool) for d in digits)
        ):
            raise ValueError(f"{name}: 'digits' must be a [min, max] pair of integers")
        low, high = digits
        if low < 1 or high < low:
            raise ValueError(f"{name}: 'digits' range {low}-{high} is invalid")
        return DifficultySettings(
            difficulty=difficulty,
            exposure_seconds=float(exposure),
            delay_seconds=float(delay),
            digit_range=(low, high),
        )
