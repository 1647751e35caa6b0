# src/fwsim_core/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

# Intermediate representation handed from the RunConfigParser to
# SimulationConfig. Quantities are already converted to SI floats; source
# vectors are still flat and unchecked against their layouts.


@dataclass(frozen=True)
class ParsedGrid:
    cells: Tuple[int, int, int]
    spacing_m: float
    origin_m: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ParsedRunConfig:
    """One run configuration file, validated and unit-converted."""
    duration_s: float
    max_steps: int
    integration_order: int
    budget_policy: str
    frequency_hz: float
    boundary_drive: Optional[str]
    grid: ParsedGrid
    driven_walls: Tuple[str, ...]
    raw_sources: Dict[str, Tuple[float, ...]] = field(default_factory=dict)
    source_yaml_path: Optional[Path] = None
