"""Global configuration for the quadopt block optimizer."""

import os

# ---------- Alias staleness policy ----------
# "accumulate": rebinding a variable never touches its previous node.
# "retract":    rebinding removes the name from the node it used to denote.
ALIAS_MODES = ("accumulate", "retract")
ALIAS_MODE = os.environ.get("QUADOPT_ALIAS_MODE", "accumulate")

# ---------- Logging ----------
LOG_LEVEL = os.environ.get("QUADOPT_LOG_LEVEL", "WARNING")

# ---------- Batch driver ----------
DEFAULT_BLOCK_PATTERN = os.environ.get("QUADOPT_BLOCK_PATTERN", "*.txt")

# ---------- Optimizer service ----------
# Base URL used by the demo client; the service itself is started with any
# ASGI server (e.g. ``uvicorn quadopt.service.app:app``).
SERVICE_URL = os.environ.get("QUADOPT_SERVICE_URL", "http://localhost:8000")

# Blocks larger than this are refused by the service (HTTP 413).
MAX_BLOCK_QUADRUPLES = int(os.environ.get("QUADOPT_MAX_BLOCK_QUADRUPLES", "10000"))
