"""Tunable constants shared by the joint engine, builders and backends."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class VisConfig:
    # minimal gap between two anchors before an arc joint is refused
    arc_overlap_eps: float = 0.1
    pin_radius: float = 3.0
    label_font_size: float = 28.0
    span_font_size: float = 22.0
    span_dy: float = 10.0
    tween_max_subdivision: int = 1
    # canvas units per TikZ centimetre
    tikz_units_per_cm: float = 100.0


_VIS_CONFIG = VisConfig()


def get_vis_config() -> VisConfig:
    return copy.deepcopy(_VIS_CONFIG)


def set_vis_config(config: VisConfig) -> None:
    global _VIS_CONFIG
    _VIS_CONFIG = copy.deepcopy(config)


__all__ = ["VisConfig", "get_vis_config", "set_vis_config"]
