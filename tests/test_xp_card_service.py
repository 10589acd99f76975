"""Tests for the XP card service layer."""
import pytest

from xpcard.domain.card_request import CardRequest
from xpcard.services.base_service import BaseService, ServiceResult
from xpcard.services.xp_card_service import XpCardService

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestGenerateCard:

    @pytest.mark.asyncio
    async def test_success_with_metadata(self, generator, avatar_path):
        result = await XpCardService.generate_card(
            username="Alice",
            avatar_url=str(avatar_path),
            level=27,
            xp=1500,
            xp_needed=2000,
            rank=3,
            generator=generator,
        )

        assert result.success
        assert result.error is None
        assert result.data.startswith(PNG_SIGNATURE)
        assert result.metadata["width"] == 1240
        assert result.metadata["height"] == 340
        assert result.metadata["gradient"] == ("#f0e87d", "#f4ea2b")
        assert result.metadata["progress"] == pytest.approx(0.75)
        assert result.metadata["role_tier"] == 25

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,message", [
        ({"username": "   "}, "username must be a valid string"),
        ({"avatar_url": ""}, "avatar_url must be a valid string"),
        ({"level": -1}, "level must be a non-negative integer"),
        ({"level": "12"}, "level must be a non-negative integer"),
        ({"xp": -5}, "xp must be a non-negative integer"),
        ({"xp_needed": 1.5}, "xp_needed must be an integer"),
        ({"rank": 0}, "rank must be a positive integer"),
        ({"badges": ["ok", 3]}, "badges must be a list of strings"),
    ])
    async def test_validation_errors(self, generator, avatar_path, overrides, message):
        fields = dict(username="Alice", avatar_url=str(avatar_path), level=27, xp=1500, xp_needed=2000, rank=3)
        fields.update(overrides)

        result = await XpCardService.generate_card(generator=generator, **fields)

        assert not result.success
        assert result.error == message
        assert result.data is None

    @pytest.mark.asyncio
    async def test_zero_xp_needed_still_renders(self, generator, avatar_path):
        result = await XpCardService.generate_card(
            username="Alice", avatar_url=str(avatar_path), level=1, xp=0, xp_needed=0, rank=1,
            generator=generator,
        )
        assert result.success
        assert result.metadata["progress"] == 1.0

    @pytest.mark.asyncio
    async def test_missing_asset_hides_internal_details(self, generator, assets_dir, avatar_path):
        (assets_dir / "xp_bg.png").unlink()

        result = await XpCardService.generate_card(
            username="Alice", avatar_url=str(avatar_path), level=27, xp=1500, xp_needed=2000, rank=3,
            generator=generator,
        )

        assert not result.success
        assert result.error == "A system error occurred during generate xp card. Please try again."


class TestDescribeCard:

    def test_low_level_card(self):
        request = CardRequest.create("Bob", "b.png", 3, 0, 100, 42, ["a"])
        facts = XpCardService.describe_card(request)
        assert facts == {
            "width": 1240,
            "height": 340,
            "gradient": ("#8f8f8f", "#636363"),
            "progress": 0.02,
            "badge_area_width": 110,
            "panel_width": 1130,
            "bar_width": 565.0,
            "role_tier": None,
        }


class TestServiceResult:

    def test_success_result(self):
        result = ServiceResult.success_result(b"png", {"width": 1})
        assert result.success and result.data == b"png" and result.metadata == {"width": 1}

    def test_validation_error(self):
        result = ServiceResult.validation_error("level", "too low")
        assert not result.success
        assert result.error == "Validation failed for level: too low"

    def test_format_error_passes_plain_messages(self):
        assert BaseService._format_error(RuntimeError("Failed to load avatar from x: HTTP 404")) == \
            "Failed to load avatar from x: HTTP 404"

    def test_format_error_hides_internals(self):
        message = BaseService._format_error(OSError("[Errno 2] No such file or directory"), "render")
        assert message == "A system error occurred during render. Please try again."
