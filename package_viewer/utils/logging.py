import logging
import queue

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

log_queue = queue.Queue()
log_history = []


class QueueHandler(logging.Handler):
    """A logging handler that feeds the Console window through a queue."""
    def __init__(self, log_queue):
        super().__init__()
        self.log_queue = log_queue

    def emit(self, record):
        message = self.format(record)
        log_history.append(message)
        self.log_queue.put(message)


def setup_logging(level=logging.INFO):
    """Configures the root logger with console and GUI queue handlers, once."""
    logger = logging.getLogger()
    logger.setLevel(level)
    if any(isinstance(handler, QueueHandler) for handler in logger.handlers):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # GUI queue handler
    queue_handler = QueueHandler(log_queue)
    queue_handler.setFormatter(formatter)
    logger.addHandler(queue_handler)
    return logger


def drain_log_queue():
    """Empties log_queue and returns the pending lines; log_history keeps them."""
    pending = []
    while True:
        try:
            pending.append(log_queue.get_nowait())
        except queue.Empty:
            return pending
