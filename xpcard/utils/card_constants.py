# xpcard/utils/card_constants.py
"""
Card constants: level gradient tiers, role icon tiers, layout and colors.
Single source of truth for every number the XP card renderer draws with.
"""

from typing import Optional, Tuple
from dataclasses import dataclass


def hex_to_rgba(value: str) -> Tuple[int, int, int, int]:
    """Parse #rgb, #rrggbb or #rrggbbaa into an RGBA tuple"""
    digits = value.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) == 6:
        digits += "ff"
    if len(digits) != 8:
        raise ValueError(f"Invalid hex color: {value!r}")
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
        int(digits[6:8], 16),
    )


@dataclass(frozen=True)
class GradientTier:
    """One row of the level gradient table"""
    min_level: int
    left: str
    right: str

    @property
    def colors(self) -> Tuple[str, str]:
        return (self.left, self.right)


class LevelGradients:
    """Level to border/bar gradient lookup"""

    # Highest min_level first; the first row with min_level <= level wins
    _TIER_DATA: Tuple[GradientTier, ...] = (
        GradientTier(50, "#7c9df8", "#1858fe"),  # Blue
        GradientTier(45, "#85f4fe", "#0feafe"),  # Cyan
        GradientTier(40, "#0bfea5", "#4fdaa4"),  # Mint
        GradientTier(35, "#91f071", "#55e421"),  # Green
        GradientTier(30, "#d3fd3f", "#bdfe3d"),  # Lime
        GradientTier(25, "#f0e87d", "#f4ea2b"),  # Yellow
        GradientTier(20, "#f7c126", "#fbb81a"),  # Amber
        GradientTier(15, "#f08b5b", "#ff7f19"),  # Orange
        GradientTier(10, "#fa5a75", "#f73f76"),  # Pink
        GradientTier(5, "#cb6eee", "#843efe"),   # Purple
    )

    DEFAULT = GradientTier(0, "#8f8f8f", "#636363")  # Gray

    @classmethod
    def get_for_level(cls, level: int) -> GradientTier:
        """Get the gradient tier for a level, gray below the first tier"""
        for tier in cls._TIER_DATA:
            if level >= tier.min_level:
                return tier
        return cls.DEFAULT

    @classmethod
    def get_all(cls) -> Tuple[GradientTier, ...]:
        return cls._TIER_DATA


def get_gradient_for_level(level: int) -> Tuple[str, str]:
    """(left, right) hex colors for a level"""
    return LevelGradients.get_for_level(level).colors


class RoleTiers:
    """Role icons exist for every multiple of 5 from 5 to 50"""

    STEP = 5
    MIN_TIER = 5
    MAX_TIER = 50

    @classmethod
    def nearest_tier(cls, level: int) -> int:
        return (level // cls.STEP) * cls.STEP

    @classmethod
    def get_for_level(cls, level: int) -> Optional[int]:
        """Role tier for a level, or None when no icon applies"""
        tier = cls.nearest_tier(level)
        if cls.MIN_TIER <= tier <= cls.MAX_TIER:
            return tier
        return None


class CardLayout:
    """Pixel geometry of the card"""

    PADDING = 20
    CONTENT_WIDTH = 1200
    CONTENT_HEIGHT = 300
    CANVAS_WIDTH = CONTENT_WIDTH + PADDING * 2
    CANVAS_HEIGHT = CONTENT_HEIGHT + PADDING * 2

    PANEL_HEIGHT = 300
    PANEL_RADIUS = 30
    BORDER_WIDTH = 6

    SHADOW_OFFSET = 28
    SHADOW_WIDTH = 32
    SHADOW_HEIGHT = 300

    # Badges
    MAX_BADGES_PER_COLUMN = 4
    BADGE_SIZE = 80
    BADGE_SPACING = 10
    BADGE_COLUMN_WIDTH = BADGE_SIZE + BADGE_SPACING
    BADGE_AREA_MARGIN = 20

    # Avatar
    AVATAR_X = 40
    AVATAR_Y = 25
    AVATAR_SIZE = 250
    AVATAR_RING_GAP = 3
    AVATAR_RING_WIDTH = 10

    # Text
    TEXT_X = 325
    NAME_Y = 100
    NAME_RIGHT_MARGIN = 120
    NAME_FONT_SIZE = 36
    LEVEL_FONT_SIZE = 44
    LEVEL_OFFSET_X = 2
    LEVEL_OFFSET_Y = 55

    # Role icon
    ROLE_ICON_SIZE = 64
    ROLE_ICON_MARGIN = 5
    ROLE_ICON_Y = 55

    # XP bar
    BAR_X = 325
    BAR_Y = 180
    BAR_HEIGHT = 45
    BAR_RADIUS = 20
    BAR_MIN_FILL = 40
    BAR_BORDER_WIDTH = 2
    BAR_TEXT_FONT_SIZE = 24
    BAR_TEXT_INSET = 15
    BAR_TEXT_BASELINE_SHIFT = 8

    MIN_PROGRESS = 0.02
    MAX_PROGRESS = 1.0
    DARK_TEXT_THRESHOLD = 0.3
    LEFT_TEXT_THRESHOLD = 0.4

    @classmethod
    def badge_area_width(cls, badge_count: int) -> int:
        columns = -(-badge_count // cls.MAX_BADGES_PER_COLUMN)
        if columns <= 0:
            return 0
        return columns * cls.BADGE_COLUMN_WIDTH + cls.BADGE_AREA_MARGIN

    @classmethod
    def panel_width(cls, badge_count: int) -> int:
        return cls.CANVAS_WIDTH - cls.badge_area_width(badge_count)


class CardColors:
    PANEL_FILL = "#121317"
    AVATAR_RING = "#2d2e2e"
    USERNAME = "#ffffff"
    RANK = "#c3d4d0"
    BAR_TRACK = "#23272A"
    BAR_BORDER = "#ffffff20"
    BAR_TEXT_DARK = "#000000"
    BAR_TEXT_LIGHT = "#ffffff"


def compute_progress(xp: int, xp_needed: int) -> float:
    """Displayed fill fraction, clamped to [0.02, 1.0]

    A non-positive ``xp_needed`` means nothing is left to earn and the bar
    is shown full.
    """
    if xp_needed <= 0:
        return CardLayout.MAX_PROGRESS
    return max(CardLayout.MIN_PROGRESS, min(xp / xp_needed, CardLayout.MAX_PROGRESS))
