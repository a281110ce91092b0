"""Configuration model and YAML helpers for the load balancer."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import InvalidConfigError


class BalancerConfig(BaseModel):
    """Tunables for :class:`~shard_balancer.balancing.load_balancer.LoadBalancer`."""

    slop: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Fraction of the average load tolerated above/below before balancing (0 = strict).",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for random single-shard assignment. None draws from system entropy.",
    )
    log_plans: bool = Field(default=False, description="Log every emitted move plan at INFO level.")


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_config(path: Optional[Path]) -> BalancerConfig:
    """Load a BalancerConfig from a YAML file."""

    if path is None:
        return BalancerConfig()

    resolved = Path(path).expanduser().resolve()
    try:
        data = _read_yaml(resolved)
    except (OSError, yaml.YAMLError) as exc:
        raise InvalidConfigError(resolved, str(exc)) from exc
    if not isinstance(data, dict):
        raise InvalidConfigError(resolved, "top-level YAML value must be a mapping")
    try:
        return BalancerConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfigError(resolved, str(exc)) from exc


def dump_config(config: BalancerConfig, path: Path) -> None:
    """Persist a BalancerConfig to disk."""

    payload = config.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, sort_keys=False)
