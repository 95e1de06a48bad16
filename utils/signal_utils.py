import signal
import sys

from utils.logger_utils import get_logger

logger = get_logger("Signal Utils")


def configure_signals():
    """
    Turns SIGTERM into a regular interpreter exit.

    sys.exit() runs atexit hooks, so buffered fixture recordings still get
    flushed when the process is terminated.
    """

    def sigterm_handler(_signo, _stack_frame):
        logger.info("Received SIGTERM. Exiting...")
        sys.exit(0)

    signal.signal(signal.SIGTERM, sigterm_handler)
