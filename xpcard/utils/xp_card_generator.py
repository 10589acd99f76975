# xpcard/utils/xp_card_generator.py
from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import aiohttp
import disnake
from PIL import Image, ImageDraw, ImageFont

from xpcard.domain.card_request import AssetLoadError, CardRequest, OptionalAssetMissing
from xpcard.utils import drawing
from xpcard.utils.card_constants import (
    CardColors,
    CardLayout,
    LevelGradients,
    RoleTiers,
    compute_progress,
    hex_to_rgba,
)
from xpcard.utils.config_manager import ConfigManager
from xpcard.utils.logger import get_logger
from xpcard.utils.text_utils import format_xp_text, strip_emojis, truncate_text_with_ellipsis

logger = get_logger(__name__)

DEFAULT_BOLD_FONTS = [
    "LiberationSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/liberation-sans/LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "arialbd.ttf",
    "Arial Bold.ttf",
]

DEFAULT_BAR_FONTS = [
    "arialbd.ttf",
    "Arial Bold.ttf",
    "/usr/share/fonts/truetype/msttcorefonts/Arial_Bold.ttf",
] + DEFAULT_BOLD_FONTS


class CardImageConfig:
    """Reads the ``xp_card`` config section, falling back to built-in defaults"""

    SECTION = "xp_card"

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        config = ConfigManager.get(cls.SECTION)
        if config is None:
            return default
        if not isinstance(config, dict):
            logger.error(f"[CONFIG] '{cls.SECTION}' is not a dict ({type(config).__name__}), using default for '{key}'")
            return default
        return config.get(key, default)

    @classmethod
    def get_nested(cls, *keys: str, default: Any = None) -> Any:
        """Get nested config value like get_nested('fonts', 'bold_search_paths')"""
        current = ConfigManager.get(cls.SECTION)
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @classmethod
    def assets_dir(cls) -> Path:
        return Path(cls.get("assets_dir", "img"))

    @classmethod
    def background_path(cls) -> Path:
        return cls.assets_dir() / cls.get("background", "xp_bg.png")

    @classmethod
    def shadow_path(cls) -> Path:
        return cls.assets_dir() / cls.get("shadow", "shadow.png")

    @classmethod
    def role_icon_path(cls, tier: int) -> Path:
        pattern = cls.get("role_icon_pattern", "role_{tier}.png")
        return cls.assets_dir() / pattern.format(tier=tier)

    @classmethod
    def bold_font_paths(cls) -> List[str]:
        return list(cls.get_nested("fonts", "bold_search_paths", default=DEFAULT_BOLD_FONTS))

    @classmethod
    def bar_font_paths(cls) -> List[str]:
        return list(cls.get_nested("fonts", "bar_search_paths", default=DEFAULT_BAR_FONTS))

    @classmethod
    def avatar_timeout(cls) -> float:
        return float(cls.get_nested("avatar", "timeout_seconds", default=10))

    @classmethod
    def compress_level(cls) -> int:
        return int(cls.get_nested("compression", "compress_level", default=6))


@dataclass(frozen=True)
class CardMetrics:
    """Layout and color decisions for a request, before anything is drawn"""
    left_color: str
    right_color: str
    progress: float
    badge_area_width: int
    panel_width: int
    bar_width: float
    role_tier: Optional[int]

    @classmethod
    def from_request(cls, request: CardRequest) -> "CardMetrics":
        gradient = LevelGradients.get_for_level(request.level)
        panel_width = CardLayout.panel_width(len(request.badges))
        return cls(
            left_color=gradient.left,
            right_color=gradient.right,
            progress=compute_progress(request.xp, request.xp_needed),
            badge_area_width=CardLayout.badge_area_width(len(request.badges)),
            panel_width=panel_width,
            bar_width=panel_width / 2,
            role_tier=RoleTiers.get_for_level(request.level),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gradient": (self.left_color, self.right_color),
            "progress": self.progress,
            "badge_area_width": self.badge_area_width,
            "panel_width": self.panel_width,
            "bar_width": self.bar_width,
            "role_tier": self.role_tier,
        }


async def fetch_image_bytes(url: str, timeout: float) -> bytes:
    """Download an image; any network or HTTP failure is an AssetLoadError"""
    try:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(url, allow_redirects=True) as resp:
                if resp.status != 200:
                    raise AssetLoadError("avatar", url, f"HTTP {resp.status}")
                return await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise AssetLoadError("avatar", url, str(e) or type(e).__name__) from e


def _decode_image(data: bytes, asset: str, location: str) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as e:
        raise AssetLoadError(asset, location, str(e)) from e


class XpCardGenerator:
    """Draws level / experience cards"""

    def __init__(self):
        self.config = CardImageConfig()
        self._bold_font_path = self._find_font(self.config.bold_font_paths())
        self._bar_font_path = self._find_font(self.config.bar_font_paths())
        self._fonts: Dict[Tuple[Optional[str], int], ImageFont.FreeTypeFont] = {}
        logger.info(f"XpCardGenerator initialized (name font: {self._bold_font_path or 'default'}, "
                    f"bar font: {self._bar_font_path or 'default'})")

    @staticmethod
    def _find_font(search_paths: Iterable[str]) -> Optional[str]:
        """First font in the list that FreeType can open"""
        for font_path in search_paths:
            try:
                ImageFont.truetype(font_path, 12)
                return font_path
            except OSError:
                continue
        logger.warning("No TrueType font found, using Pillow's default font")
        return None

    def _font(self, font_path: Optional[str], size: int) -> ImageFont.FreeTypeFont:
        key = (font_path, size)
        if key not in self._fonts:
            if font_path:
                self._fonts[key] = ImageFont.truetype(font_path, size)
            else:
                self._fonts[key] = ImageFont.load_default(size=size)
        return self._fonts[key]

    def bold_font(self, size: int) -> ImageFont.FreeTypeFont:
        return self._font(self._bold_font_path, size)

    def bar_font(self, size: int) -> ImageFont.FreeTypeFont:
        return self._font(self._bar_font_path, size)

    # ---- asset loading ----

    def _load_asset(self, asset: str, path: Path) -> Image.Image:
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except (OSError, Image.DecompressionBombError) as e:
            logger.error(f"Required asset '{asset}' could not be loaded from {path}: {e}")
            raise AssetLoadError(asset, str(path), str(e)) from e

    def _load_role_icon(self, tier: int) -> Image.Image:
        path = self.config.role_icon_path(tier)
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except (OSError, Image.DecompressionBombError) as e:
            raise OptionalAssetMissing(f"role icon {tier}", str(path), str(e)) from e

    async def _load_avatar(self, avatar_url: str) -> Image.Image:
        """Load the avatar from an http(s) URL, a file:// URL or a local path"""
        if avatar_url.startswith(("http://", "https://")):
            data = await fetch_image_bytes(avatar_url, self.config.avatar_timeout())
        else:
            path = Path(avatar_url[len("file://"):] if avatar_url.startswith("file://") else avatar_url)
            try:
                data = await asyncio.to_thread(path.read_bytes)
            except OSError as e:
                raise AssetLoadError("avatar", avatar_url, str(e)) from e
        return _decode_image(data, "avatar", avatar_url)

    # ---- rendering ----

    async def render_xp_card(self, request: CardRequest) -> bytes:
        """Render a card to PNG bytes

        Assets load in a fixed order (background, shadow, avatar, role icon);
        a missing role icon is the only failure that does not abort the render.
        """
        background = await asyncio.to_thread(self._load_asset, "background", self.config.background_path())
        shadow = await asyncio.to_thread(self._load_asset, "shadow", self.config.shadow_path())
        try:
            avatar = await self._load_avatar(request.avatar_url)
        except AssetLoadError as e:
            logger.error(f"Avatar load failed for '{request.username}': {e}")
            raise

        card = await asyncio.to_thread(self._render_card_sync, request, background, shadow, avatar)
        return await asyncio.to_thread(self.encode_png, card)

    def _render_card_sync(
        self,
        request: CardRequest,
        background: Image.Image,
        shadow: Image.Image,
        avatar: Image.Image,
    ) -> Image.Image:
        username = strip_emojis(request.username)
        metrics = CardMetrics.from_request(request)
        panel_width = metrics.panel_width
        left, right = metrics.left_color, metrics.right_color

        card = Image.new("RGBA", (CardLayout.CANVAS_WIDTH, CardLayout.CANVAS_HEIGHT), (0, 0, 0, 0))
        card.alpha_composite(background.resize(card.size, Image.Resampling.LANCZOS))

        # Everything below is drawn relative to the panel origin
        oy = CardLayout.PADDING

        self._draw_panel(card, shadow, panel_width, oy, left, right)
        self._draw_avatar(card, avatar, oy)

        name_font = self.bold_font(CardLayout.NAME_FONT_SIZE)
        max_name_width = panel_width - CardLayout.TEXT_X - CardLayout.NAME_RIGHT_MARGIN
        display_name = truncate_text_with_ellipsis(username, max_name_width, name_font.getlength)

        ImageDraw.Draw(card).text(
            (CardLayout.TEXT_X, oy + CardLayout.NAME_Y),
            display_name,
            font=name_font,
            fill=hex_to_rgba(CardColors.USERNAME),
            anchor="ls",
        )

        if metrics.role_tier is not None:
            self._draw_role_icon(card, metrics.role_tier, name_font.getlength(display_name), oy)

        self._draw_level_and_rank(card, request, right, oy)
        self._draw_xp_bar(card, request, metrics, oy)

        # Badge icons are not drawn; the reserved area only narrows the panel
        if request.badges:
            logger.debug(f"{len(request.badges)} badge(s) reserved {metrics.badge_area_width}px, not drawn")

        logger.info(f"Rendered XP card for '{username}' (level {request.level}, rank #{request.rank})")
        return card

    def _draw_panel(self, card: Image.Image, shadow: Image.Image, panel_width: int, oy: int,
                    left: str, right: str) -> None:
        shadow_img = shadow.resize((CardLayout.SHADOW_WIDTH, CardLayout.SHADOW_HEIGHT), Image.Resampling.LANCZOS)
        card.alpha_composite(shadow_img, (panel_width - CardLayout.SHADOW_OFFSET, oy))

        panel_path = drawing.rounded_rect_path(0, oy, panel_width, CardLayout.PANEL_HEIGHT, CardLayout.PANEL_RADIUS)
        drawing.fill_path(card, panel_path, CardColors.PANEL_FILL)

        line = CardLayout.BORDER_WIDTH
        border_path = drawing.rounded_rect_path(
            line / 2,
            oy + line / 2,
            panel_width - line,
            CardLayout.PANEL_HEIGHT - line,
            CardLayout.PANEL_RADIUS - 5,
        )
        gradient = drawing.horizontal_gradient(card.size, left, right, 0, panel_width)
        drawing.paint_masked(card, gradient, drawing.stroke_mask(card.size, border_path, line))

    def _draw_avatar(self, card: Image.Image, avatar: Image.Image, oy: int) -> None:
        size = CardLayout.AVATAR_SIZE
        x, y = CardLayout.AVATAR_X, oy + CardLayout.AVATAR_Y
        drawing.paste_circular(card, avatar, (x, y), size)

        # Ring drawn after the clip so it frames the avatar
        center = (x + size / 2, y + size / 2)
        drawing.stroke_circle(
            card,
            center,
            size / 2 + CardLayout.AVATAR_RING_GAP,
            CardColors.AVATAR_RING,
            CardLayout.AVATAR_RING_WIDTH,
        )

    def _draw_role_icon(self, card: Image.Image, tier: int, name_width: float, oy: int) -> None:
        try:
            icon = self._load_role_icon(tier)
        except OptionalAssetMissing:
            logger.warning(f"Role icon for level {tier} not found.")
            return

        size = CardLayout.ROLE_ICON_SIZE
        icon = icon.resize((size, size), Image.Resampling.LANCZOS)
        x = int(CardLayout.TEXT_X + name_width + CardLayout.ROLE_ICON_MARGIN)
        card.alpha_composite(icon, (x, oy + CardLayout.ROLE_ICON_Y))

    def _draw_level_and_rank(self, card: Image.Image, request: CardRequest, color: str, oy: int) -> None:
        draw = ImageDraw.Draw(card)
        font = self.bold_font(CardLayout.LEVEL_FONT_SIZE)
        x = CardLayout.TEXT_X + CardLayout.LEVEL_OFFSET_X
        y = oy + CardLayout.NAME_Y + CardLayout.LEVEL_OFFSET_Y

        level_text = f"Level: {request.level}"
        draw.text((x, y), level_text, font=font, fill=hex_to_rgba(color), anchor="ls")
        draw.text(
            (x + font.getlength(level_text), y),
            f" | #{request.rank}",
            font=font,
            fill=hex_to_rgba(CardColors.RANK),
            anchor="ls",
        )

    def _draw_xp_bar(self, card: Image.Image, request: CardRequest, metrics: CardMetrics, oy: int) -> None:
        if request.xp_needed <= 0:
            logger.warning(f"xp_needed={request.xp_needed} for '{request.username}', drawing a full bar")

        x, y = CardLayout.BAR_X, oy + CardLayout.BAR_Y
        width, height = metrics.bar_width, CardLayout.BAR_HEIGHT
        radius = CardLayout.BAR_RADIUS
        progress = metrics.progress

        track = drawing.rounded_rect_path(x, y, width, height, radius)
        drawing.fill_path(card, track, CardColors.BAR_TRACK)

        fill_width = max(CardLayout.BAR_MIN_FILL, width * progress)
        clip = drawing.rounded_rect_mask(card.size, x, y, fill_width, height, radius)
        gradient = drawing.horizontal_gradient(card.size, metrics.left_color, metrics.right_color, x, x + width)
        drawing.paint_masked(card, gradient, clip)

        drawing.stroke_path(card, track, CardColors.BAR_BORDER, CardLayout.BAR_BORDER_WIDTH)

        font = self.bar_font(CardLayout.BAR_TEXT_FONT_SIZE)
        text = format_xp_text(request.xp, request.xp_needed)
        if progress > CardLayout.DARK_TEXT_THRESHOLD:
            color = CardColors.BAR_TEXT_DARK
        else:
            color = CardColors.BAR_TEXT_LIGHT
        if progress > CardLayout.LEFT_TEXT_THRESHOLD:
            text_x = x + CardLayout.BAR_TEXT_INSET
        else:
            text_x = x + width - font.getlength(text) - CardLayout.BAR_TEXT_INSET
        text_y = y + height / 2 + CardLayout.BAR_TEXT_BASELINE_SHIFT

        ImageDraw.Draw(card).text((text_x, text_y), text, font=font, fill=hex_to_rgba(color), anchor="ls")

    def encode_png(self, card: Image.Image) -> bytes:
        buffer = io.BytesIO()
        card.save(buffer, format="PNG", compress_level=self.config.compress_level())
        return buffer.getvalue()

    def to_discord_file(self, png: bytes, filename: str = "xp_card.png") -> disnake.File:
        """Wrap rendered PNG bytes for sending with a Discord message"""
        return disnake.File(io.BytesIO(png), filename=filename)


_generator: Optional[XpCardGenerator] = None


def get_generator() -> XpCardGenerator:
    """Shared generator, created on first use so config is read after startup"""
    global _generator
    if _generator is None:
        _generator = XpCardGenerator()
    return _generator


# Public API
async def generate_xp_card(
    username: str,
    avatar_url: str,
    level: int,
    xp: int,
    xp_needed: int,
    rank: int,
    badges: Optional[Iterable[str]] = None,
) -> bytes:
    """Render an XP card and return the PNG bytes"""
    request = CardRequest.create(username, avatar_url, level, xp, xp_needed, rank, badges)
    return await get_generator().render_xp_card(request)


async def generate_xp_card_file(
    username: str,
    avatar_url: str,
    level: int,
    xp: int,
    xp_needed: int,
    rank: int,
    badges: Optional[Iterable[str]] = None,
    filename: str = "xp_card.png",
) -> disnake.File:
    png = await generate_xp_card(username, avatar_url, level, xp, xp_needed, rank, badges)
    return get_generator().to_discord_file(png, filename)
