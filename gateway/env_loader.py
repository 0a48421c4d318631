# gateway/env_loader.py
import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def ensure_env_loaded(path: str = ".env") -> bool:
    """Load variables from a .env file without overriding the real environment."""
    env_path = Path(path).resolve()
    if not env_path.exists():
        logger.debug("Environment file not found at %s", env_path)
        return False
    load_dotenv(dotenv_path=env_path, override=False)
    logger.info("Loaded environment variables from %s", env_path)
    return True
