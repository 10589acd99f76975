"""
Pytest configuration and fixtures.

Provides fixtures for:
- Card assets (background, shadow, role icons, avatar) written to tmp_path
- ConfigManager pointed at those assets, cleared after each test
- A fresh XpCardGenerator per test
"""
import io

import pytest
from PIL import Image

from xpcard.domain.card_request import CardRequest
from xpcard.utils.config_manager import ConfigManager
from xpcard.utils.xp_card_generator import XpCardGenerator

BACKGROUND_COLOR = (50, 100, 150, 255)
AVATAR_COLOR = (255, 0, 0, 255)


def png_bytes(size, color) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def assets_dir(tmp_path):
    """Asset directory with background, shadow and two role icons"""
    img = tmp_path / "img"
    img.mkdir()
    Image.new("RGBA", (620, 170), BACKGROUND_COLOR).save(img / "xp_bg.png")
    Image.new("RGBA", (32, 300), (0, 0, 0, 90)).save(img / "shadow.png")
    Image.new("RGBA", (64, 64), (0, 255, 0, 255)).save(img / "role_25.png")
    Image.new("RGBA", (64, 64), (0, 0, 255, 255)).save(img / "role_50.png")
    return img


@pytest.fixture
def avatar_path(tmp_path):
    path = tmp_path / "avatar.png"
    path.write_bytes(png_bytes((300, 300), AVATAR_COLOR))
    return path


@pytest.fixture
def card_config(assets_dir):
    """Point the renderer at the temporary assets"""
    ConfigManager.clear()
    ConfigManager.set("xp_card", {"assets_dir": str(assets_dir)})
    yield ConfigManager.get("xp_card")
    ConfigManager.clear()


@pytest.fixture
def generator(card_config):
    return XpCardGenerator()


@pytest.fixture
def alice_request(avatar_path):
    return CardRequest.create(
        username="Alice",
        avatar_url=str(avatar_path),
        level=27,
        xp=1500,
        xp_needed=2000,
        rank=3,
        badges=[],
    )
