"""Application preferences (persisted to disk)."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from pathlib import Path

from .machine import MachineConfig


@dataclass
class AppSettings:
    """User preferences, serialized to ~/.tangentcnc/settings.json."""

    machine: dict = field(default_factory=lambda: MachineConfig().to_dict())
    resolution: int = 100
    last_open_dir: str = ""
    last_save_dir: str = ""

    @staticmethod
    def _path() -> Path:
        return Path.home() / ".tangentcnc" / "settings.json"

    def machine_config(self) -> MachineConfig:
        return MachineConfig.from_dict(self.machine)

    def save(self) -> None:
        p = self._path()
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(asdict(self), indent=2))

    @classmethod
    def load(cls) -> "AppSettings":
        p = cls._path()
        if p.exists():
            data = json.loads(p.read_text())
            return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        return cls()
