# scripts/launch_web.py
"""
Launch the HTTP API using settings from configs/config.yaml.
"""

import sys
from pathlib import Path
import uvicorn

# Add project root to the Python path to allow absolute imports
sys.path.append(str(Path(__file__).resolve().parent.parent))
from algoflow.utils.config_loader import get_default_config, load_config
from algoflow.utils.logging_config import setup_logging_from_config

if __name__ == "__main__":
    try:
        config = load_config()
    except FileNotFoundError:
        print("No configs/config.yaml found, using defaults")
        config = get_default_config()

    try:
        setup_logging_from_config(config.logging)

        print(f"Starting API at http://{config.ui.host}:{config.ui.port}")
        uvicorn.run(
            "algoflow.api.main:app",
            host=config.ui.host,
            port=config.ui.port,
            log_level=config.logging.level.lower()
        )
    except Exception as e:
        print(f"Failed to start API server: {e}")
        sys.exit(1)
