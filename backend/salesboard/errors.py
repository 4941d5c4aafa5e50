"""Exceptions raised by the reporting service and caught at the request boundary."""


class SalesboardError(Exception):
    """Base exception; the message is the short text sent to the client."""
    pass


class SeedError(SalesboardError):
    """Seed source fetch or bulk insert failed."""
    pass


class QueryError(SalesboardError):
    """A read or aggregation against the store failed."""
    pass
