"""Main application entry point."""

import os

from traffic_events.config.environment import IS_PRODUCTION_ENVIRONMENT
from traffic_events.api.app import app

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get('PORT', 4000))

    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - use string reference so hot-reload works
        uvicorn.run(
            "traffic_events.api.app:app",
            host="0.0.0.0",
            port=port,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - single worker per process; the storage pool is per process
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=port,
            reload=False,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
