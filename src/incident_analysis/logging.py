from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # stdout is reserved for the MCP stdio protocol.
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr)
