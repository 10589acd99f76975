# xpcard/services/xp_card_service.py
from typing import Any, Dict, Iterable, Optional

from xpcard.domain.card_request import CardRequest
from xpcard.services.base_service import BaseService, ServiceResult
from xpcard.utils.card_constants import CardLayout
from xpcard.utils.logger import get_logger
from xpcard.utils.xp_card_generator import CardMetrics, XpCardGenerator, get_generator

logger = get_logger(__name__)

class XpCardService(BaseService):
    """XP card rendering for bots and web handlers"""

    @classmethod
    def _build_request(
        cls,
        username: Any,
        avatar_url: Any,
        level: Any,
        xp: Any,
        xp_needed: Any,
        rank: Any,
        badges: Optional[Iterable[str]],
    ) -> CardRequest:
        cls._validate_string(username, "username")
        cls._validate_string(avatar_url, "avatar_url")
        cls._validate_non_negative_int(level, "level")
        cls._validate_non_negative_int(xp, "xp")
        cls._validate_int(xp_needed, "xp_needed")
        cls._validate_positive_int(rank, "rank")

        badge_list = list(badges or [])
        if any(not isinstance(badge, str) for badge in badge_list):
            raise ValueError("badges must be a list of strings")

        return CardRequest.create(username, avatar_url, level, xp, xp_needed, rank, badge_list)

    @classmethod
    async def generate_card(
        cls,
        username: Any,
        avatar_url: Any,
        level: Any,
        xp: Any,
        xp_needed: Any,
        rank: Any,
        badges: Optional[Iterable[str]] = None,
        generator: Optional[XpCardGenerator] = None,
    ) -> ServiceResult[bytes]:
        """Validate the fields and render the card; PNG bytes on success"""
        request: Optional[CardRequest] = None

        async def _operation():
            nonlocal request
            request = cls._build_request(username, avatar_url, level, xp, xp_needed, rank, badges)
            return await (generator or get_generator()).render_xp_card(request)

        result = await cls._safe_execute(_operation, "generate xp card")
        if result.success and request is not None:
            result.metadata = cls.describe_card(request)
        else:
            logger.warning(f"XP card for {username!r} not generated: {result.error}")
        return result

    @classmethod
    def describe_card(cls, request: CardRequest) -> Dict[str, Any]:
        """Layout facts for a request without drawing it"""
        return {
            "width": CardLayout.CANVAS_WIDTH,
            "height": CardLayout.CANVAS_HEIGHT,
            **CardMetrics.from_request(request).to_dict(),
        }
