#!/usr/bin/env python3
"""
Run script for the taskhub API.
Launches uvicorn with the application factory.
"""
import sys
import traceback

import uvicorn

from taskhub.config import load_settings

if __name__ == "__main__":
    settings = load_settings()
    try:
        print(f"Starting taskhub API server on http://{settings.host}:{settings.port}")
        uvicorn.run(
            "taskhub.main:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except Exception as e:
        print(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
