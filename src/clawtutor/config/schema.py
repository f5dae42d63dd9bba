"""Configuration schema for clawtutor settings files."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass
class ClawtutorConfig:
    """Settings read from ``config.yaml``.

    None values indicate "not set" and will be inherited from the next
    layer down (local < global < defaults).
    """

    # Engine id pre-selected when prompting for an auth provider
    engine: str | None = None

    # Specification file, relative to the working directory
    spec_path: str | None = None

    def merge(self, other: ClawtutorConfig) -> ClawtutorConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new ClawtutorConfig instance.
        """
        return ClawtutorConfig(
            engine=other.engine if other.engine is not None else self.engine,
            spec_path=other.spec_path if other.spec_path is not None else self.spec_path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClawtutorConfig:
        """Create a ClawtutorConfig from a dictionary. Unknown keys are ignored."""
        engine_raw = data.get("engine")
        engine = str(engine_raw).strip().lower() if engine_raw else None
        spec_path_raw = data.get("spec_path")
        spec_path = str(spec_path_raw) if spec_path_raw else None
        return cls(engine=engine, spec_path=spec_path)


DEFAULT_CONFIG = ClawtutorConfig()
