from pathlib import Path
import json

import pydantic

from core.logger import get_logger
from models.annotation import DefaultConfig

logger = get_logger(__name__)


def load_default_config(path: Path | str) -> DefaultConfig:
    path = Path(path)
    if not path.exists():
        logger.warning(f"Default configuration {path} not found, starting without defaults")
        return DefaultConfig()
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return DefaultConfig()
    try:
        return DefaultConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        logger.error(f"Default configuration {path} is invalid: {e}")
        return DefaultConfig()
