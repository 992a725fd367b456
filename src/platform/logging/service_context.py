"""
Service context for log lines.

Identifies which service instance wrote a log line when several API workers
and sweepers share one log sink.
"""

import os
import socket
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'cinema-booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    try:
        host = socket.gethostname().split('.')[0][:12] or 'localhost'
    except OSError:
        host = 'localhost'

    return f'{service_name}@{deploy_env}:{host}:{os.getpid()}'
