from .value import (
    Value as Value,
    StringValue as StringValue,
    FloatValue as FloatValue,
)
