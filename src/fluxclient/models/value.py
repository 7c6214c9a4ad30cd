"""
Typed cell values decoded from a query response.

The database response is heterogeneous across measurements, so each decoded cell
is wrapped in one of two value types:

* [`StringValue`][fluxclient.models.value.StringValue] for JSON strings.
* [`FloatValue`][fluxclient.models.value.FloatValue] for every JSON number. Integral
  numbers are normalized to 64-bit floats as well; the integer/float distinction
  of the source document is not kept.

Both types expose permissive accessors (`as_float()`, `as_int()`) that fall back
to zero instead of raising when the value is not numeric.
"""

import math

import pydantic
from pydantic import ConfigDict


class Value(pydantic.BaseModel):
    """
    Base class of the decoded cell values.

    Values are immutable and hashable, and compare equal only to values of the
    same type holding the same data.
    """

    model_config = ConfigDict(frozen=True)

    def as_float(self) -> float:
        """Returns the numeric value, or `0.0` if the value is not numeric."""
        return 0.0

    def as_int(self) -> int:
        """Returns the numeric value truncated toward zero, or `0` if not numeric."""
        return 0


class StringValue(Value):
    """A string cell, such as a timestamp in RFC3339 format or a host name."""

    data: str
    """The raw string content."""

    def __str__(self) -> str:
        return self.data


class FloatValue(Value):
    """A numeric cell, always stored as a 64-bit float."""

    data: float
    """The numeric content."""

    def as_float(self) -> float:
        return self.data

    def as_int(self) -> int:
        # NaN and infinities have no integer counterpart
        if not math.isfinite(self.data):
            return 0
        return int(self.data)

    def __str__(self) -> str:
        return str(self.data)
