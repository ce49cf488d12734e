#!/usr/bin/env python3
import logging

import uvicorn

from delivery_analytics.app import create_app
from delivery_analytics.core.config import DEV_MODE

logging.basicConfig(
    level=logging.DEBUG if DEV_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("delivery_analytics")

app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting Delivery Analytics on 0.0.0.0:8000 (development mode: {DEV_MODE})")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=DEV_MODE)
