"""JSON logging on stdout for the Lambda handlers

Each handler package calls `initialize_logging()` from its `__init__.py`,
so the configuration is in place before the handler module logs anything.
One JSON object is written per record; keys passed through `extra=` land
at the top level next to the base fields:

    {
        "timestamp": "2025-10-15T12:00:00.000Z",
        "level": "INFO",
        "logger": "linkpulse.lambdas.redirect_url.app",
        "message": "Redirecting client. Responding with 302.",
        "shortcode": "abc123",
        "event": "REDIRECT_SUCCESS"
    }

LOG_LEVEL selects the root level (INFO when unset or unknown). AWS SDK
chatter is kept at WARNING regardless.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linkpulse.constants import ENV


DEFAULT_LOG_LEVEL = 'INFO'
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')

# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(logging.LogRecord('', logging.INFO, '', 0, '', (), None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        log.update({key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS and key not in log})
        return json.dumps(log, default=str)


def log_level_from_env() -> str:
    level = os.getenv(ENV.App.LOG_LEVEL, DEFAULT_LOG_LEVEL).strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else DEFAULT_LOG_LEVEL


def initialize_logging() -> None:
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': log_level_from_env(), 'handlers': ['stdout']},
        }
    )
