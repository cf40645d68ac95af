"""
Entry point for the tourneykit JSON API.

    python web_main.py          ← serves on server.host:server.port from config.yaml
"""

from pathlib import Path

import uvicorn

from tourneykit.config import Config, load_config
from tourneykit.log import configure_logging

if __name__ == "__main__":
    config = load_config() if Path("config.yaml").exists() else Config()
    configure_logging(config.app)
    uvicorn.run(
        "tourneykit.web.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
    )
