# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Application logger.

Handlers, levels and rotation are declared in etc/logging.conf; the only
value filled in here is the absolute path of log/app.log, substituted for the
``%(log_file)s`` placeholder before the file is handed to fileConfig.

    from core.logger import logger
    logger.info("list %s unlocked by user %s", list_id, user_id)

Never pass a plaintext password or a hash to the logger.
"""

import configparser
import logging
import logging.config
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[2]
_CONF = _ROOT / "etc" / "logging.conf"
_LOG_FILE = _ROOT / "log" / "app.log"


def _configure() -> logging.Logger:
    _LOG_FILE.parent.mkdir(exist_ok=True)
    text = _CONF.read_text(encoding="utf-8").replace("%(log_file)s", _LOG_FILE.as_posix())
    # no interpolation: the format strings use %(asctime)s and friends
    parser = configparser.RawConfigParser()
    parser.read_string(text)
    logging.config.fileConfig(parser, disable_existing_loggers=False)
    return logging.getLogger("listkeeper")


logger = _configure()
