#!/usr/bin/env python3
"""Run the VAT engine API with uvicorn."""
from dotenv import load_dotenv
load_dotenv()

import uvicorn

from vat_engine.config import Settings


if __name__ == "__main__":
    settings = Settings()
    uvicorn.run(
        "vat_engine.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )
