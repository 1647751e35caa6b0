# src/fwsim_core/parser/parser.py
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import cerberus
import pint
import yaml

from ..constants import DEFAULT_DRIVE_FREQUENCY_HZ, DEFAULT_MAX_STEPS
from ..discretization.yee import WALLS
from ..units import FREQUENCY_DIMENSIONALITY, LENGTH_DIMENSIONALITY, TIME_DIMENSIONALITY, ureg
from .exceptions import ParsingError, SchemaValidationError
from .raw_data import ParsedGrid, ParsedRunConfig

logger = logging.getLogger(__name__)

SOURCE_KEYS = ("dielectric_sphere", "magnetic_shell", "voltaic_pile", "current_ring")
BUDGET_POLICIES = ("coarsen", "strict", "shorten")
BOUNDARY_DRIVE_NAMES = ("none", "sinusoidal", "gaussian")

# In-memory mappings have no file; reports show this instead.
_IN_MEMORY = Path("<in-memory configuration>")

# YAML 1.1 reads exponents without a sign (1.0e9) as strings.
_NUMBER_ITEM_RULE = {"type": "number", "coerce": "numeric_string"}
_SOURCE_VECTOR_RULE = {"type": "list", "required": False, "finite_numbers": True, "schema": _NUMBER_ITEM_RULE}


class EnhancedValidator(cerberus.Validator):
    """Cerberus validator with the extra rules used by run configuration files."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['unique_items'] = {'schema': {'type': 'boolean'}}
        self.rules['finite_numbers'] = {'schema': {'type': 'boolean'}}

    def _normalize_coerce_numeric_string(self, value: Any) -> Any:
        # A non-numeric string raises here and is reported as a coercion error.
        return float(value) if isinstance(value, str) else value

    def _validate_unique_items(self, constraint: bool, field: str, value: Any):
        """
        Validates that a list holds no repeated entries.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or not isinstance(value, list):
            return
        seen, duplicates = set(), set()
        for item in value:
            if item in seen:
                duplicates.add(item)
            seen.add(item)
        if duplicates:
            self._error(field, f"Duplicate entries found: {sorted(duplicates)}")

    def _validate_finite_numbers(self, constraint: bool, field: str, value: Any):
        """
        Validates that every entry of a numeric list is finite.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or not isinstance(value, list):
            return
        bad = [v for v in value if isinstance(v, (int, float)) and not math.isfinite(v)]
        if bad:
            self._error(field, f"Non-finite values are not allowed: {bad}")


class RunConfigParser:
    """
    Loads a run configuration YAML file, validates it against a strict schema and
    converts every dimensional value to SI with pint. Produces a `ParsedRunConfig`.
    """
    _quantity_rule = {"type": ["string", "number"], "empty": False}

    _schema = {
        "duration": {**_quantity_rule, "required": True},
        "max_steps": {"type": "integer", "required": False, "min": 1, "default": DEFAULT_MAX_STEPS},
        "integration_order": {"type": "integer", "required": False, "allowed": [1, 2, 3, 4], "default": 1},
        "budget_policy": {"type": "string", "required": False, "allowed": list(BUDGET_POLICIES), "default": "coarsen"},
        "frequency": {**_quantity_rule, "required": False},
        "boundary_drive": {"type": "string", "required": False, "allowed": list(BOUNDARY_DRIVE_NAMES), "default": "none"},
        "grid": {
            "type": "dict", "required": True, "schema": {
                "cells": {"type": "list", "required": True, "minlength": 3, "maxlength": 3, "schema": {"type": "integer", "min": 1}},
                "spacing": {**_quantity_rule, "required": True},
                "origin": {"type": "list", "required": False, "minlength": 3, "maxlength": 3, "finite_numbers": True, "schema": dict(_NUMBER_ITEM_RULE)},
            },
        },
        "driven_walls": {"type": "list", "required": False, "unique_items": True, "schema": {"type": "string", "allowed": list(WALLS)}},
        "sources": {
            "type": "dict", "required": False, "schema": {key: dict(_SOURCE_VECTOR_RULE) for key in SOURCE_KEYS},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.info("RunConfigParser initialized with strict structural validation rules.")

    def parse(self, yaml_path: Union[str, Path]) -> ParsedRunConfig:
        """Parses and validates a run configuration file."""
        resolved_path = Path(yaml_path).resolve()
        logger.info(f"Parsing run configuration: {resolved_path}")
        return self.parse_mapping(self._load_yaml(resolved_path), resolved_path)

    def parse_mapping(self, content: Dict[str, Any], source_path: Optional[Path] = None) -> ParsedRunConfig:
        """Validates an already loaded mapping with the same rules as `parse`."""
        source_path = source_path or _IN_MEMORY
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, source_path)
        data = self._validator.document

        grid_data = data["grid"]
        grid = ParsedGrid(
            cells=tuple(int(n) for n in grid_data["cells"]),
            spacing_m=self._to_si(grid_data["spacing"], LENGTH_DIMENSIONALITY, "m", "grid.spacing", source_path),
            origin_m=tuple(float(x) for x in grid_data.get("origin", (0.0, 0.0, 0.0))),
        )
        frequency_hz = DEFAULT_DRIVE_FREQUENCY_HZ
        if "frequency" in data:
            frequency_hz = self._to_si(data["frequency"], FREQUENCY_DIMENSIONALITY, "Hz", "frequency", source_path)

        raw_sources: Dict[str, tuple] = {
            key: tuple(float(v) for v in vector)
            for key, vector in (data.get("sources") or {}).items()
            if vector
        }
        boundary_drive = None if data["boundary_drive"] == "none" else data["boundary_drive"]

        parsed = ParsedRunConfig(
            duration_s=self._to_si(data["duration"], TIME_DIMENSIONALITY, "s", "duration", source_path),
            max_steps=data["max_steps"],
            integration_order=data["integration_order"],
            budget_policy=data["budget_policy"],
            frequency_hz=frequency_hz,
            boundary_drive=boundary_drive,
            grid=grid,
            driven_walls=tuple(data.get("driven_walls", ())),
            raw_sources=raw_sources,
            source_yaml_path=source_path,
        )
        logger.debug(f"Parsed run configuration: {parsed}")
        return parsed

    def _to_si(self, raw: Union[str, float, int], dimensionality, si_unit: str, field_name: str, source: Path) -> float:
        """Reads `raw` as a pint quantity of the given dimensionality; bare numbers are taken as SI."""
        try:
            qty = ureg.Quantity(raw) if isinstance(raw, str) else ureg.Quantity(float(raw), si_unit)
            if qty.dimensionality != dimensionality:
                raise pint.DimensionalityError(qty.units, ureg.Unit(si_unit))
            value = float(qty.to(si_unit).magnitude)
        except (pint.DimensionalityError, pint.UndefinedUnitError, pint.DefinitionSyntaxError, TypeError, ValueError) as e:
            raise ParsingError(
                details=f"Field '{field_name}' value '{raw}' is not a valid quantity in units compatible with '{si_unit}': {e}",
                file_path=source,
            ) from e
        if not (math.isfinite(value) and value > 0.0):
            raise ParsingError(details=f"Field '{field_name}' must be positive and finite, got {raw!r}.", file_path=source)
        return value

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ParsingError(details=f"Run configuration file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The YAML file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)
        return content
