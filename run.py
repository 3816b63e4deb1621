#!/usr/bin/env python3
"""Run the scanner API."""
import uvicorn

from techdebt.api.dependencies import get_config

if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "techdebt.main:app",
        host=config.server.host,
        port=config.server.port,
    )
