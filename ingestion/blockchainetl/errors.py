class IngestionError(Exception):
    """Base class for errors raised by the ingestion pipeline."""


class ChannelClosed(IngestionError):
    """
    The other side of a channel is gone.

    Raised by Sender.send once the receiver has been closed, and by the
    receive methods once every sender is closed and the buffer is drained.
    """


class ChannelTimeout(IngestionError, TimeoutError):
    """Nothing arrived on the channel before the timeout expired."""


class FixtureError(IngestionError):
    """A fixture file could not be read or does not hold a list of block payloads."""
