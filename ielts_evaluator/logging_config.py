"""
Logging setup for the IELTS evaluator.

Plain text logging by default; set LOG_FORMAT=json for one JSON object per
line, which log shippers can parse without a custom grok pattern.
"""

import os
import json
import logging
from datetime import datetime, timezone

# Attributes that the service attaches through `extra=` and that should
# survive into structured output.
EXTRA_FIELDS = ('request_id', 'model', 'latency_ms', 'operation')


class JSONLogFormatter(logging.Formatter):
    """JSON log formatter with request correlation fields."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for field_name in EXTRA_FIELDS:
            value = getattr(record, field_name, None)
            if value is not None:
                log_entry[field_name] = value

        if record.exc_info and record.exc_info[0]:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
            }

        return json.dumps(log_entry)


def configure_logging(level: str = None, log_format: str = None) -> None:
    """Configure root logging from arguments or LOG_LEVEL / LOG_FORMAT."""
    level = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    log_format = (log_format or os.environ.get('LOG_FORMAT', 'text')).lower()

    handler = logging.StreamHandler()
    if log_format == 'json':
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))

    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level, logging.INFO))
