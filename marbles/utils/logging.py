"""
Logging helpers for the marbles harness.

Every module logs under the ``marbles`` namespace.  Schedule traffic is logged
at DEBUG, so lowering ``harness_level`` alone is the quickest way to watch a
replay unfold without turning on DEBUG for the stream library or the test
runner.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
HARNESS_LOGGER = "marbles"


def configure_logging(
    level: int = logging.INFO,
    format: Optional[str] = None,
    *,
    harness_level: Optional[int] = None,
) -> bool:
    """
    Configure the root logger once and optionally set the harness logger level.

    ``harness_level`` is applied even when the root logger was already set up
    elsewhere.  Returns ``False`` when the root logger was left untouched.
    """

    if harness_level is not None:
        logging.getLogger(HARNESS_LOGGER).setLevel(harness_level)

    root = logging.getLogger()
    if root.handlers:
        # Respect any user provided configuration.
        return False

    logging.basicConfig(
        level=level,
        format=format or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    return True
