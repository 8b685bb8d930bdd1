# gridstar/core/config.py
#!/usr/bin/env python3
"""
Search setup: defaults, JSON scenario files, env/argv overrides.

Scenario file keys (only size/start/target are required):

    {"size": 40, "start": [3, 8], "target": [38, 38],
     "barrier_count": 1000, "barriers": [[x, y], ...],
     "seed": 7, "legacy_admission": false}

Overrides:
- ENV: GRIDSTAR_SCENARIO=<name|path>, GRIDSTAR_SEED=<int>
- CLI: --scenario=<name|path>, --seed=<int>
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence
import json
import logging
import os

from gridstar.core.errors import ValidationError
from gridstar.core.types import Coord

logger = logging.getLogger(__name__)

SCENARIO_DIR = Path(__file__).resolve().parents[1] / "scenarios"
DEFAULT_SCENARIO = "default"

DEFAULT_SIZE = 40
DEFAULT_START: Coord = (3, 8)
DEFAULT_TARGET: Coord = (38, 38)
DEFAULT_BARRIER_COUNT = 1000


@dataclass
class SearchConfig:
    size: int = DEFAULT_SIZE
    start: Coord = DEFAULT_START
    target: Coord = DEFAULT_TARGET
    barrier_count: int = DEFAULT_BARRIER_COUNT
    barriers: List[Coord] = field(default_factory=list)
    seed: Optional[int] = None
    legacy_admission: bool = False
    name: str = "custom"


def _coord(value, key: str) -> Coord:
    if not isinstance(value, (list, tuple)) or len(value) != 2 \
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        raise ValidationError(f"'{key}' must be a pair of integers, got {value!r}")
    return (value[0], value[1])


def _int(data: Mapping, key: str, default=None) -> Optional[int]:
    value = data.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{key}' must be an integer, got {value!r}")
    return value


def _bool(data: Mapping, key: str, default: bool = False) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValidationError(f"'{key}' must be true or false, got {value!r}")
    return value


def parse_scenario(data: Mapping, name: str = "custom") -> SearchConfig:
    if not isinstance(data, Mapping):
        raise ValidationError(f"scenario must be a JSON object, got {type(data).__name__}")
    missing = [k for k in ("size", "start", "target") if k not in data]
    if missing:
        raise ValidationError(f"scenario '{name}' is missing {', '.join(missing)}")

    barriers = data.get("barriers", [])
    if not isinstance(barriers, list):
        raise ValidationError("'barriers' must be a list of [x, y] pairs")

    return SearchConfig(
        size=_int(data, "size"),
        start=_coord(data["start"], "start"),
        target=_coord(data["target"], "target"),
        barrier_count=_int(data, "barrier_count", 0),
        barriers=[_coord(b, "barriers") for b in barriers],
        seed=_int(data, "seed"),
        legacy_admission=_bool(data, "legacy_admission"),
        name=name,
    )


def load_scenario(path: Path) -> SearchConfig:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as ex:
        raise ValidationError(f"cannot read scenario {path}: {ex}") from ex
    except json.JSONDecodeError as ex:
        raise ValidationError(f"scenario {path} is not valid JSON: {ex}") from ex
    return parse_scenario(data, name=path.stem)


def scenario_files(directory: Path = SCENARIO_DIR) -> Dict[str, Path]:
    if not directory.is_dir():
        return {}
    return {p.stem: p for p in sorted(directory.glob("*.json"))}


def find_scenario(name_or_path: str, directory: Path = SCENARIO_DIR) -> Path:
    candidate = Path(name_or_path)
    if candidate.suffix == ".json" and candidate.exists():
        return candidate
    known = scenario_files(directory)
    if name_or_path in known:
        return known[name_or_path]
    raise ValidationError(f"unknown scenario '{name_or_path}' (known: {', '.join(known) or 'none'})")


def _arg(argv: Sequence[str], flag: str) -> Optional[str]:
    value = None
    for arg in argv:
        if arg.startswith(flag + "="):
            value = arg.split("=", 1)[1]
    return value


def resolve_config(argv: Sequence[str] = (), env: Optional[Mapping[str, str]] = None,
                   directory: Path = SCENARIO_DIR) -> SearchConfig:
    """Pick the scenario and seed from argv first, then the environment."""
    env = os.environ if env is None else env

    scenario = _arg(argv, "--scenario") or env.get("GRIDSTAR_SCENARIO")
    if scenario:
        config = load_scenario(find_scenario(scenario, directory))
    elif DEFAULT_SCENARIO in scenario_files(directory):
        config = load_scenario(scenario_files(directory)[DEFAULT_SCENARIO])
    else:
        logger.warning("No scenario files under %s; using built-in defaults", directory)
        config = SearchConfig(name=DEFAULT_SCENARIO)

    seed = _arg(argv, "--seed") or env.get("GRIDSTAR_SEED")
    if seed is not None:
        try:
            config = replace(config, seed=int(seed))
        except ValueError:
            raise ValidationError(f"seed must be an integer, got {seed!r}") from None
    return config
