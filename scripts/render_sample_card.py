#!/usr/bin/env python3
"""
Render a few sample XP cards to disk for eyeballing layout changes.

Usage: python scripts/render_sample_card.py <avatar path or URL> [output.png]
Needs the card assets (xp_bg.png, shadow.png, role_*.png) in the configured
assets directory.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xpcard.services.xp_card_service import XpCardService
from xpcard.utils.config_manager import ConfigManager
from xpcard.utils.logger import get_logger

logger = get_logger(__name__)

SAMPLES = [
    {"username": "Alice", "level": 27, "xp": 1500, "xp_needed": 2000, "rank": 3},
    {"username": "newcomer 🎉", "level": 3, "xp": 0, "xp_needed": 400, "rank": 812},
    {"username": "A_really_long_display_name_that_will_not_fit_on_the_card", "level": 50,
     "xp": 123456, "xp_needed": 100000, "rank": 1, "badges": ["early", "helper", "artist", "mod", "vip"]},
]


async def main(avatar: str, output: Path) -> int:
    ConfigManager.load_all()
    failures = 0

    for i, sample in enumerate(SAMPLES):
        result = await XpCardService.generate_card(avatar_url=avatar, **sample)
        if not result.success:
            logger.error(f"Sample {i} failed: {result.error}")
            failures += 1
            continue

        path = output.with_name(f"{output.stem}_{i}{output.suffix}")
        path.write_bytes(result.data)
        logger.info(f"Wrote {path} ({len(result.data):,} bytes, metadata={result.metadata})")

    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    out = Path(sys.argv[2]) if len(sys.argv) > 2 else Path("xp_card.png")
    sys.exit(asyncio.run(main(sys.argv[1], out)))
