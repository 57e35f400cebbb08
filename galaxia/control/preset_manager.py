from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..generator import GalaxyParameters
from .config import DEFAULTS

logger = logging.getLogger(__name__)


class PresetManager:
    """Persist and retrieve named galaxy parameter presets.

    All presets live in one JSON document mapping a name to the camelCase
    parameter dict.  The ``Default`` preset always exists and is read-only.
    """

    DEFAULT_NAME = "Default"

    def __init__(self, storage_path: Optional[Path] = None):
        base_dir = Path.home() / ".galaxia"
        self.path = Path(storage_path) if storage_path is not None else (base_dir / "presets.json")
        self._presets: Dict[str, dict] = {}
        self._load()

    # ------------------------------------------------------------------ utils
    def _load(self) -> None:
        self._presets = {}
        raw: object = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable presets file %s: %s", self.path, exc)
                raw = {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring presets file %s: expected an object", self.path)
            raw = {}
        for name, payload in raw.items():
            if name == self.DEFAULT_NAME or not isinstance(payload, dict):
                continue
            try:
                self._presets[str(name)] = self._sanitize(payload)
            except ValueError as exc:
                logger.warning("Skipping invalid preset %r: %s", name, exc)
        self._presets[self.DEFAULT_NAME] = copy.deepcopy(DEFAULTS)

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {name: payload for name, payload in self._presets.items() if name != self.DEFAULT_NAME}
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        tmp.replace(self.path)

    @staticmethod
    def _sanitize(payload: dict) -> dict:
        return GalaxyParameters.from_dict(payload).validate().to_dict()

    def _check_name(self, name: str) -> str:
        clean = (name or "").strip()
        if not clean:
            raise ValueError("Preset name must not be empty")
        return clean

    def _check_editable(self, name: str) -> None:
        if name == self.DEFAULT_NAME:
            raise ValueError("The default preset cannot be modified")

    # ------------------------------------------------------------------ API
    def names(self) -> List[str]:
        others = sorted((n for n in self._presets if n != self.DEFAULT_NAME), key=str.lower)
        return [self.DEFAULT_NAME] + others

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def get(self, name: str) -> dict:
        try:
            return copy.deepcopy(self._presets[name])
        except KeyError:
            raise KeyError(f"Unknown preset: {name}") from None

    def save(self, name: str, payload: dict) -> str:
        name = self._check_name(name)
        self._check_editable(name)
        self._presets[name] = self._sanitize(payload)
        self._write()
        return name

    def rename(self, old: str, new: str) -> str:
        self._check_editable(old)
        new = self._check_name(new)
        self._check_editable(new)
        if old not in self._presets:
            raise KeyError(f"Unknown preset: {old}")
        if new != old and new in self._presets:
            raise ValueError(f"A preset named {new!r} already exists")
        self._presets[new] = self._presets.pop(old)
        self._write()
        return new

    def delete(self, name: str) -> None:
        self._check_editable(name)
        if name not in self._presets:
            raise KeyError(f"Unknown preset: {name}")
        del self._presets[name]
        self._write()

    def find_match(self, payload: dict) -> Optional[str]:
        """Return the name of a preset equal to ``payload``, ignoring ``rotate``."""

        try:
            target = self._sanitize(payload)
        except ValueError:
            return None
        target.pop("rotate", None)
        for name in self.names():
            candidate = dict(self._presets[name])
            candidate.pop("rotate", None)
            if candidate == target:
                return name
        return None
