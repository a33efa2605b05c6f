"""
Loading user rule tables from YAML or JSON files.

A rule file holds a ``rules`` list. Each entry is a mapping whose keys mirror
the ``Info`` fields, with ``names`` standing for ``cpp_names``::

    rules:
      - names: [MyInt]
        cpp_types: [int]
      - names: [LEGACY_API]
        skip: true
"""

import logging
from dataclasses import fields
from typing import Any, Dict, Iterable, List, Optional

from core.startup_config import (
    ConfigValidationError,
    load_config_payload,
    report_config_problem,
    resolve_strict_config_validation,
)
from parsing.infomap import Info, InfoMap

logger = logging.getLogger(__name__)

_FIELD_TYPES: Dict[str, str] = {}
for _f in fields(Info):
    _FIELD_TYPES[_f.name] = "bool" if _f.default is False else (
        "str" if _f.name in ("cpp_text", "java_text", "base") else "tuple"
    )
_ALIASES = {"names": "cpp_names"}


def rule_from_mapping(entry: Any) -> Info:
    """Build an ``Info`` from one rule mapping.

    Raises:
        ConfigValidationError: If the entry is malformed.
    """
    if not isinstance(entry, dict):
        raise ConfigValidationError(
            f"Rule must be a mapping, got {type(entry).__name__}"
        )
    values: Dict[str, Any] = {}
    for key, value in entry.items():
        name = _ALIASES.get(key, key)
        kind = _FIELD_TYPES.get(name)
        if kind is None:
            raise ConfigValidationError(f"Unknown rule field '{key}'")
        if kind == "bool":
            if not isinstance(value, bool):
                raise ConfigValidationError(f"Rule field '{key}' must be a boolean")
        elif kind == "str":
            if value is not None and not isinstance(value, str):
                raise ConfigValidationError(f"Rule field '{key}' must be a string")
        else:
            if isinstance(value, str):
                value = (value,)
            elif isinstance(value, list) and all(isinstance(v, str) for v in value):
                value = tuple(value)
            else:
                raise ConfigValidationError(
                    f"Rule field '{key}' must be a string or a list of strings"
                )
        values[name] = value
    return Info(**values)


def load_rules(
    entries: Iterable[Any],
    info_map: InfoMap,
    strict: bool = False,
    source: str = "<memory>",
) -> int:
    """Register rule mappings into ``info_map``, returning how many were added."""
    added = 0
    for i, entry in enumerate(entries):
        try:
            info = rule_from_mapping(entry)
        except ConfigValidationError as exc:
            report_config_problem(f"{source}: rule #{i}: {exc}", strict, "skipping rule")
            continue
        info_map.put(info)
        added += 1
    return added


def load_rule_file(
    path: str,
    parent: Optional[InfoMap] = None,
    strict: Optional[bool] = None,
    info_map: Optional[InfoMap] = None,
) -> InfoMap:
    """Read a rule file into a new table layered over ``parent``.

    When ``info_map`` is given the rules are added to it instead.
    """
    if strict is None:
        strict = resolve_strict_config_validation()
    if info_map is None:
        info_map = InfoMap(parent)
    payload = load_config_payload(path, strict=strict)
    entries = payload.get("rules", [])
    if not isinstance(entries, list):
        report_config_problem(f"{path}: 'rules' must be a list", strict)
        return info_map
    added = load_rules(entries, info_map, strict=strict, source=path)
    logger.info("Loaded %d rules from %s", added, path)
    return info_map


def load_rule_files(
    paths: Iterable[str],
    parent: Optional[InfoMap] = None,
    strict: Optional[bool] = None,
) -> InfoMap:
    """Merge several rule files, in order, into one user table."""
    info_map = InfoMap(parent)
    for path in paths:
        load_rule_file(path, strict=strict, info_map=info_map)
    return info_map


def dump_rules(infos: Iterable[Info]) -> List[dict]:
    """Inverse of ``rule_from_mapping``, for writing learned rules back out."""
    payload = []
    for info in infos:
        entry = info.to_dict()
        if "cpp_names" in entry:
            entry["names"] = entry.pop("cpp_names")
        payload.append(entry)
    return payload
