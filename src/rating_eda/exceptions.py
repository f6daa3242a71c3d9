"""Exceptions raised by the rating_eda package."""


class RatingEdaError(Exception):
    """Base class for rating_eda errors."""


class SchemaError(RatingEdaError):
    """A record set is missing columns required by the next stage."""


class PipelineError(RatingEdaError):
    """A pipeline stage was called with arguments it cannot apply."""
