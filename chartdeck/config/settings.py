"""Runtime configuration for chartdeck."""

import os
from pathlib import Path
from typing import Final

from loguru import logger

# Load environment variables from .env file if it exists
try:
    from dotenv import load_dotenv

    # 1. Project root (2 levels up from this file)
    project_root = Path(__file__).parent.parent.parent / ".env"
    # 2. Current working directory
    cwd_env = Path.cwd() / ".env"

    env_loaded = False
    for env_path in [project_root, cwd_env]:
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")
            env_loaded = True
            break

    if not env_loaded:
        load_dotenv()
except Exception as e:
    logger.warning(f"Could not load .env file: {e}")


# Top-N threshold for categorical axes. Fixed by product decision; the
# builder takes it as a keyword argument so it can become user-facing later.
CATEGORY_LIMIT: Final[int] = 20

# Rows shown in the selected-fields preview table
PREVIEW_ROW_LIMIT: Final[int] = 10

# Chart configuration
CHART_CONFIG = {
    "default_chart_kind": os.getenv("CHARTDECK_DEFAULT_CHART_KIND", "bar"),
    "rebuild_debounce_seconds": float(
        os.getenv("CHARTDECK_REBUILD_DEBOUNCE_SECONDS", "0.3")
    ),
}

# Data source configuration
SOURCE_CONFIG = {
    "fetch_limit": int(os.getenv("CHARTDECK_FETCH_LIMIT", "100")),
    "sample_latency_seconds": float(
        os.getenv("CHARTDECK_SAMPLE_LATENCY_SECONDS", "0.5")
    ),
    "server_selection_timeout_ms": int(
        os.getenv("CHARTDECK_SERVER_SELECTION_TIMEOUT_MS", "10000")
    ),
    # System databases never offered to the user
    "excluded_databases": ("admin", "local", "config"),
}

# Document store connection settings
CONNECTION_CONFIG = {
    "connection_string": os.getenv("CHARTDECK_MONGODB_URI"),
    "store_key": os.getenv("CHARTDECK_CONNECTION_KEY", "chartdeck.connection"),
    "store_path": os.getenv(
        "CHARTDECK_CONNECTION_STORE", str(Path.home() / ".chartdeck" / "store.json")
    ),
}
