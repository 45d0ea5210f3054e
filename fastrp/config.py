"""
Configuration for the random projection embedding and PageRank algorithms.
"""

from __future__ import annotations

import dataclasses
import numbers
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .exceptions import ConfigurationError
from .utils import resolve_positive_int

ENV_PREFIX = "FASTRP_"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_float_list(value: str) -> List[float]:
    try:
        return [float(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise ConfigurationError(f"Expected comma separated numbers, got {value!r}") from None


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    value = env.get(key)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None


def _env_optional_int(env: Mapping[str, str], key: str) -> Optional[int]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None


def _check_int(name: str, value: Any, minimum: Optional[int] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")


def _from_mapping(cls, values: Mapping[str, Any]):
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unexpected configuration key(s) for {cls.__name__}: {', '.join(unknown)}")
    return cls(**values)


@dataclass(frozen=True)
class RandomProjectionConfig:
    """Configuration for random projection node embeddings."""

    embedding_dimension: int = 128
    sparsity: int = 3
    iterations: int = 3
    # Empty means concatenate every iteration instead of weighting them.
    iteration_weights: Sequence[float] = ()
    normalization_strength: float = 0.0
    normalize_l2: bool = False
    concurrency: int = 4
    random_seed: Optional[int] = None

    def __post_init__(self):
        _check_int("embedding_dimension", self.embedding_dimension, 1)
        _check_int("sparsity", self.sparsity, 1)
        _check_int("iterations", self.iterations, 1)
        _check_int("concurrency", self.concurrency, 1)
        if self.random_seed is not None:
            _check_int("random_seed", self.random_seed)
        try:
            weights = tuple(float(w) for w in self.iteration_weights)
        except (TypeError, ValueError):
            raise ConfigurationError(f"iteration_weights must be numbers, got {self.iteration_weights!r}") from None
        object.__setattr__(self, "iteration_weights", weights)
        if self.iteration_weights and len(self.iteration_weights) != self.iterations:
            raise ConfigurationError(
                f"iteration_weights must be empty or contain exactly iterations={self.iterations} "
                f"values, got {len(self.iteration_weights)}"
            )

    @property
    def uses_iteration_weights(self) -> bool:
        return bool(self.iteration_weights)

    @property
    def embedding_row_length(self) -> int:
        """Length of one node's output row."""
        if self.uses_iteration_weights:
            return self.embedding_dimension
        return self.embedding_dimension * self.iterations

    def to_dict(self) -> Dict[str, Any]:
        values = dataclasses.asdict(self)
        values["iteration_weights"] = list(self.iteration_weights)
        return values

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "RandomProjectionConfig":
        return _from_mapping(cls, config_dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RandomProjectionConfig":
        """Create a configuration from ``FASTRP_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        weights = env.get(f"{ENV_PREFIX}ITERATION_WEIGHTS")
        return cls(
            embedding_dimension=resolve_positive_int(
                env.get(f"{ENV_PREFIX}EMBEDDING_DIMENSION"), defaults.embedding_dimension
            ),
            sparsity=resolve_positive_int(env.get(f"{ENV_PREFIX}SPARSITY"), defaults.sparsity),
            iterations=resolve_positive_int(env.get(f"{ENV_PREFIX}ITERATIONS"), defaults.iterations),
            iteration_weights=_parse_float_list(weights) if weights else (),
            normalization_strength=_env_float(
                env, f"{ENV_PREFIX}NORMALIZATION_STRENGTH", defaults.normalization_strength
            ),
            normalize_l2=_parse_bool(env.get(f"{ENV_PREFIX}NORMALIZE_L2", "false")),
            concurrency=resolve_positive_int(env.get(f"{ENV_PREFIX}CONCURRENCY"), defaults.concurrency),
            random_seed=_env_optional_int(env, f"{ENV_PREFIX}RANDOM_SEED"),
        )


@dataclass(frozen=True)
class PageRankConfig:
    """Configuration for (personalized) PageRank."""

    damping_factor: float = 0.85
    max_iterations: int = 20
    tolerance: float = 1e-07
    concurrency: int = 4

    def __post_init__(self):
        if not 0.0 <= self.damping_factor < 1.0:
            raise ConfigurationError(f"damping_factor must be in [0, 1), got {self.damping_factor}")
        _check_int("max_iterations", self.max_iterations, 1)
        if self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")
        _check_int("concurrency", self.concurrency, 1)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "PageRankConfig":
        return _from_mapping(cls, config_dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PageRankConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            damping_factor=_env_float(env, f"{ENV_PREFIX}PAGERANK_DAMPING_FACTOR", defaults.damping_factor),
            max_iterations=resolve_positive_int(
                env.get(f"{ENV_PREFIX}PAGERANK_MAX_ITERATIONS"), defaults.max_iterations
            ),
            tolerance=_env_float(env, f"{ENV_PREFIX}PAGERANK_TOLERANCE", defaults.tolerance),
            concurrency=resolve_positive_int(env.get(f"{ENV_PREFIX}CONCURRENCY"), defaults.concurrency),
        )
