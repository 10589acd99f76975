# xpcard/domain/card_request.py
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from dataclasses import dataclass, field


class AssetLoadError(OSError):
    """A required image (background, shadow, avatar) could not be loaded"""

    def __init__(self, asset: str, location: str, reason: str = ""):
        self.asset = asset
        self.location = location
        self.reason = reason
        message = f"Failed to load {asset} from {location}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class OptionalAssetMissing(AssetLoadError):
    """An optional image (role icon) is absent; the card is drawn without it"""
    pass


@dataclass(frozen=True)
class CardRequest:
    """Everything needed to draw one XP card"""
    username: str
    avatar_url: str
    level: int
    xp: int
    xp_needed: int
    rank: int
    # Accepted and reserved in the layout, not drawn yet
    badges: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.level < 0:
            raise ValueError("level must be a non-negative integer")
        if self.xp < 0:
            raise ValueError("xp must be a non-negative integer")
        if self.rank < 1:
            raise ValueError("rank must be a positive integer")
        if not isinstance(self.badges, tuple):
            object.__setattr__(self, "badges", tuple(self.badges))

    @classmethod
    def create(
        cls,
        username: str,
        avatar_url: str,
        level: int,
        xp: int,
        xp_needed: int,
        rank: int,
        badges: Optional[Iterable[str]] = None,
    ) -> "CardRequest":
        return cls(username, avatar_url, level, xp, xp_needed, rank, tuple(badges or ()))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CardRequest":
        """Build from a mapping using either camelCase or snake_case keys"""
        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        return cls.create(
            username=pick("username", default=""),
            avatar_url=pick("avatar_url", "avatarURL", default=""),
            level=int(pick("level", default=0)),
            xp=int(pick("xp", default=0)),
            xp_needed=int(pick("xp_needed", "xpNeeded", default=0)),
            rank=int(pick("rank", default=1)),
            badges=pick("badges"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "avatar_url": self.avatar_url,
            "level": self.level,
            "xp": self.xp,
            "xp_needed": self.xp_needed,
            "rank": self.rank,
            "badges": list(self.badges),
        }
