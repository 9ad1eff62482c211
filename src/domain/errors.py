"""
Domain exceptions raised by the analysis pipeline.
Entrypoints map these onto HTTP status codes; nothing below the
application layer knows about HTTP.
"""


class StockAnalysisError(Exception):
    """Base class for every failure the pipeline reports to its caller."""


class InvalidTicker(StockAnalysisError, ValueError):
    """The user-supplied code is not a recognised 6-digit A-share code."""


class UpstreamUnavailable(StockAnalysisError, RuntimeError):
    """The price provider could not be reached or answered with an error."""


class NoData(StockAnalysisError, LookupError):
    """The price provider answered but returned no bars for the security."""
