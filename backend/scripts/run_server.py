#!/usr/bin/env python3
"""Serve the CivicPulse API with uvicorn."""
from __future__ import annotations

import sys

from uvicorn import run

from civicpulse.core.config import get_settings


if __name__ == "__main__":
    settings = get_settings()
    port = int(sys.argv[1]) if len(sys.argv) > 1 else settings.port
    run("civicpulse.main:app", host=settings.host, port=port, log_level=settings.log_level.lower())
