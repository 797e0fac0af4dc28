from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union

import yaml

from gowatcher.board import BoardConfig
from gowatcher.feed import FeedConfig

T = TypeVar("T")


@dataclass
class AppConfig:
    board: BoardConfig = field(default_factory=BoardConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)


def _build(cls: Type[T], section: Optional[Dict[str, Any]], name: str) -> T:
    section = section or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    return cls(**section)


def config_from_dict(cfg: Dict[str, Any]) -> AppConfig:
    unknown = sorted(set(cfg) - {"board", "feed"})
    if unknown:
        raise ValueError(f"Unknown config sections: {', '.join(unknown)}")
    return AppConfig(
        board=_build(BoardConfig, cfg.get("board"), "board"),
        feed=_build(FeedConfig, cfg.get("feed"), "feed"),
    )


def load_config(path: Union[str, Path, None]) -> AppConfig:
    """Read a YAML config; a missing path gives the defaults."""
    if path is None:
        return AppConfig()
    path = Path(path)
    if not path.exists():
        return AppConfig()
    cfg = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path} must contain a mapping")
    return config_from_dict(cfg)
