# othello_engine/config.py
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import os
import tomllib  # python >=3.11

ALGORITHMS = ("alphabeta", "minimax")
TERMINAL_SCORING = ("sentinel", "outcome")

# Defaults for the four evaluation signals
DEFAULT_WEIGHTS = {
    "coin_parity": 1,
    "mobility": 2,
    "corner": 3,
    "stability": 4,
}


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass
class SearchConfig:
    depth: int = 4
    algorithm: str = "alphabeta"
    iterative_deepening: bool = True
    time_limit_ms: Optional[int] = None  # None means depth-only

    def validate(self):
        if self.algorithm not in ALGORITHMS:
            raise ConfigError(f"unknown search algorithm: {self.algorithm!r}")
        if not isinstance(self.depth, int) or self.depth < 1:
            raise ConfigError(f"search depth must be a positive integer, got {self.depth!r}")
        if self.time_limit_ms is not None and self.time_limit_ms <= 0:
            raise ConfigError("time_limit_ms must be positive when set")


@dataclass
class EvalConfig:
    weights: Dict[str, int] = field(default_factory=lambda: DEFAULT_WEIGHTS.copy())
    # "sentinel" scores every finished game as the maximum score,
    # "outcome" separates win / draw / loss for the side to move.
    terminal_scoring: str = "sentinel"

    def validate(self):
        if self.terminal_scoring not in TERMINAL_SCORING:
            raise ConfigError(f"unknown terminal scoring: {self.terminal_scoring!r}")
        missing = set(DEFAULT_WEIGHTS) - set(self.weights)
        if missing:
            raise ConfigError(f"missing evaluation weights: {sorted(missing)}")
        for name, value in self.weights.items():
            if not isinstance(value, int):
                raise ConfigError(f"weight {name!r} must be an integer, got {value!r}")


@dataclass
class UIConfig:
    engine_name: str = "OthelloEngine"
    board_size: int = 8
    api_port: int = 8000

    def validate(self):
        if self.board_size < 4 or self.board_size % 2:
            raise ConfigError(f"board size must be even and >= 4, got {self.board_size}")


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    def validate(self) -> "Config":
        self.search.validate()
        self.eval.validate()
        self.ui.validate()
        return self

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Config":
        cfg = Config()
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if not hasattr(target, k):
                    continue
                if k == "weights":
                    merged = DEFAULT_WEIGHTS.copy()
                    merged.update(v)
                    v = merged
                setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg.validate()

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        if not os.path.exists(path):
            return Config()
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        return Config.from_dict(raw)


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ENGINE_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("ENGINE_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError as e:
        raise ConfigError(f"ENGINE_SEARCH_DEPTH must be an integer: {override_depth!r}") from e
