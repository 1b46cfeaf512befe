"""
Exception classes for tablepivot.

These exceptions signal configuration problems detected before a pivot is
built. Errors raised while the pivot runs (bad column indexes, failing
aggregators) propagate unchanged to the caller.
"""


class PivotConfigurationError(ValueError):
    """Raised when a pivot configuration is incomplete or malformed.

    This error is raised when the builder is constructed without one of the
    mandatory configuration groups, or when a configuration mapping cannot be
    parsed. Examples:
        - No key columns were given
        - No pivot column (or no aggregator for it) was given
        - No value column was given
        - ``percent_of_total`` is a string other than ``"row"`` or ``"col"``
          (booleans mean no conversion)
    """
    pass
