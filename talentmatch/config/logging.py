import logging
import sys
from typing import Dict, Any, Optional
import json
from datetime import datetime, timezone

# Attributes set via `extra=` that are copied into the JSON record
STRUCTURED_FIELDS = ('subject_id', 'target_id', 'batch', 'wave', 'status_code')

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)

def setup_logging(level: str = 'INFO', json_output: bool = True, log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration for the application.
    JSON lines in deployed environments, a compact text format for local development.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_output:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter('%(levelname)s [%(filename)s:%(lineno)d] - %(message)s')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Reduce noise from other libraries
    logging.getLogger('httpx').setLevel('WARNING')
    logging.getLogger('httpcore').setLevel('WARNING')
    logging.getLogger('openai').setLevel('WARNING')
    logging.getLogger('asyncio').setLevel('WARNING')

    logging.info("Logging system initialized")
