from enum import Enum


class TypeColor(str, Enum):
    blue = "#3B82F6"
    violet = "#8B5CF6"
    teal = "#14B8A6"
    amber = "#F59E0B"
    red = "#EF4444"
    emerald = "#10B981"


class TypeIcon(str, Enum):
    star = "Star"
    heart = "Heart"
    lightbulb = "Lightbulb"
    shield = "Shield"
    zap = "Zap"
    crown = "Crown"


COLORS = [c.value for c in TypeColor]
ICONS = [i.value for i in TypeIcon]


def default_color(position: int) -> str:
    return COLORS[position % len(COLORS)]


def default_icon(position: int) -> str:
    return ICONS[position % len(ICONS)]
