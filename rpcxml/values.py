from datetime import datetime, date, timezone
from typing import Dict, List, Union

from .errors import ValueTypeError

# Every shape a value can take on the wire.
Value = Union[
    str, int, float, bool, datetime, date, bytes, bytearray,
    List["Value"], Dict[str, "Value"]
]

# Zone used for both directions when the caller does not give one.
DEFAULT_ZONE = timezone.utc

DATE_FORMAT = "%Y%m%dT%H:%M:%S"

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

STRING = "string"
INT = "int"
I4 = "i4"
DOUBLE = "double"
BOOLEAN = "boolean"
DATETIME = "dateTime.iso8601"
BASE64 = "base64"
STRUCT = "struct"
ARRAY = "array"

VALUE = "value"
NAME = "name"
MEMBER = "member"
DATA = "data"
PARAM = "param"
FAULT = "fault"


# Ordered values of a methodResponse, one per decoded <param>. The get_*
# accessors return the value at 'index' when it has the requested type
# and raise ValueTypeError otherwise.
class Response(object):
    def __init__(self, values=None):
        self.values = list(values) if values is not None else []

    @property
    def value_count(self):
        return len(self.values)

    def __len__(self):
        return len(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def __iter__(self):
        return iter(self.values)

    def __eq__(self, other):
        if isinstance(other, Response):
            return self.values == other.values
        return NotImplemented

    def __repr__(self):
        return f"Response({self.values!r})"

    def _typed(self, index, kind):
        value = self.values[index]
        if type(value) is not kind:
            raise ValueTypeError(index, kind, value)
        return value

    def get_string(self, index):
        return self._typed(index, str)

    def get_integer(self, index):
        return self._typed(index, int)

    def get_boolean(self, index):
        return self._typed(index, bool)

    def get_double(self, index):
        return self._typed(index, float)

    def get_datetime(self, index):
        return self._typed(index, datetime)

    def get_binary(self, index):
        return self._typed(index, bytes)

    def get_array(self, index):
        return self._typed(index, list)

    def get_struct(self, index):
        return self._typed(index, dict)
