"""
Runtime settings read from the environment.

Protocol constants live in ipni_advert.ingest.config; this module only holds
the knobs an operator may turn for the command-line tools.
"""

import logging
import os

from ipni_advert.ingest.config import RECOMMENDED_MAX_BLOCK_BYTES

_SUPPORTED_LOG_LEVELS: list[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_LEVEL = os.environ.get("IPNI_LOG_LEVEL", "INFO").upper()
"""Log level of the command-line tools when --verbose is not given."""

if LOG_LEVEL not in _SUPPORTED_LOG_LEVELS:
    raise ValueError(
        f"Invalid IPNI_LOG_LEVEL environment variable: '{LOG_LEVEL}'. "
        f"Supported values: {_SUPPORTED_LOG_LEVELS}"
    )

LOG_LEVEL_NO: int = logging.getLevelName(LOG_LEVEL)
"""Numeric form of LOG_LEVEL."""

_max_block_bytes = os.environ.get("IPNI_MAX_BLOCK_BYTES", str(RECOMMENDED_MAX_BLOCK_BYTES))

# Default size budget of one entry chunk block.
try:
    MAX_BLOCK_BYTES = int(_max_block_bytes)
except ValueError:
    raise ValueError(
        f"Invalid IPNI_MAX_BLOCK_BYTES environment variable: '{_max_block_bytes}'. "
        "Expected a positive integer"
    ) from None

if MAX_BLOCK_BYTES <= 0:
    raise ValueError(
        f"Invalid IPNI_MAX_BLOCK_BYTES environment variable: '{_max_block_bytes}'. "
        "Expected a positive integer"
    )
