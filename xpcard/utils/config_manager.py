# xpcard/utils/config_manager.py
import json
from pathlib import Path
from typing import Any, Optional, Union
import logging

logger = logging.getLogger("ConfigManager")

class ConfigManager:
    _configs: dict[str, Any] = {}
    _base_path: Path = Path("data/config")

    @classmethod
    def set_base_path(cls, path: Union[str, Path]) -> None:
        """Point the manager at another config directory (does not reload)."""
        cls._base_path = Path(path)

    @classmethod
    def load_all(cls) -> None:
        """Loads all .json files in the config directory into memory."""
        cls._configs.clear()

        if not cls._base_path.exists():
            logger.info(f"Config directory '{cls._base_path}' not found, using defaults.")
            return

        for file in sorted(cls._base_path.glob("*.json")):
            try:
                with file.open("r", encoding="utf-8") as f:
                    cls._configs[file.stem] = json.load(f)
                    logger.info(f"Loaded config: {file.name}")
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in {file.name}: {e}")
            except OSError as e:
                logger.error(f"Failed to load {file.name}: {e}")

        logger.info(f"{len(cls._configs)} config file(s) loaded.")

    @classmethod
    def get(cls, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Get config data."""
        return cls._configs.get(key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Replace a config section in memory."""
        cls._configs[key] = value

    @classmethod
    def clear(cls) -> None:
        cls._configs.clear()

    @classmethod
    def reload(cls) -> None:
        """Reload all config files."""
        logger.info("Reloading config files...")
        cls.load_all()
