import json
from pathlib import Path

from pydantic import ValidationError

from mcp_bridge.logging import get_logger
from mcp_bridge.models.config import Config

logger = get_logger("utils")


def load_config(path: str | Path) -> Config:
    """
    Load and validate a bridge config file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or does not match the schema
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse config JSON: {e}") from e

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config: {e}") from e

    logger.debug(f"Loaded {len(config.servers)} servers from {path}")
    return config
