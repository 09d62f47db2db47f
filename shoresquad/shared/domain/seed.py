"""Seed collections loaded from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .models import Cleanup, Crew, ForecastDay

logger = logging.getLogger(__name__)

PACKAGED_SEED_PATH = Path(__file__).resolve().parent.parent / "config" / "seed.yaml"


@dataclass(frozen=True)
class SeedData:
    """Fixed starting collections used when nothing has been persisted."""

    crews: Tuple[Crew, ...] = ()
    cleanups: Tuple[Cleanup, ...] = ()
    forecast: Tuple[ForecastDay, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeedData":
        return cls(
            crews=tuple(Crew.model_validate(c) for c in data.get("crews") or ()),
            cleanups=tuple(Cleanup.model_validate(c) for c in data.get("cleanups") or ()),
            forecast=tuple(ForecastDay.model_validate(f) for f in data.get("forecast") or ()),
        )


def load_seed(path: Optional[Union[str, Path]] = None) -> SeedData:
    """Load seed data from ``path``, or the seed shipped with the package.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file is not a YAML mapping or an entry is invalid
    """
    seed_path = Path(path) if path else PACKAGED_SEED_PATH
    with open(seed_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Seed file {seed_path} must contain a mapping")

    seed = SeedData.from_dict(data)
    logger.debug(
        f"Loaded seed from {seed_path}: {len(seed.crews)} crews, {len(seed.cleanups)} cleanups"
    )
    return seed
