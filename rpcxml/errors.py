class XmlRpcError(Exception):
    def __init__(self, code, message):
        self.code = code
        self.message = message
        super().__init__(message)


# -------------------
# |   Client side   |
# -------------------


class UnsupportedType(XmlRpcError, TypeError):
    def __init__(self, value):
        self.value = value
        super().__init__(0, f"Unsupported parameter type: {type(value).__name__}")


class InvalidMethodName(XmlRpcError, ValueError):
    def __init__(self, name):
        self.name = name
        super().__init__(0, "Method name cannot be empty")


class InvalidEndpoint(XmlRpcError, ValueError):
    def __init__(self, url):
        self.url = url
        super().__init__(0, f"Not an absolute http(s) URL: {url!r}")


# -------------------
# |    Response     |
# |     parsing     |
# -------------------


class ResponseParseError(XmlRpcError):
    def __init__(self, message):
        super().__init__(0, message)


class XmlParseError(ResponseParseError):
    pass


class DateParseError(ResponseParseError):
    pass


class NumberParseError(ResponseParseError):
    pass


class Base64ParseError(ResponseParseError):
    pass


# Error reported by the server through a <fault> element.
class Fault(XmlRpcError):
    def __repr__(self):
        return f"<Fault {self.code}: {self.message!r}>"


class UndefinedFault(XmlRpcError):
    def __init__(self, payload=None):
        self.payload = payload
        super().__init__(0, "Undefined fault response")


class HttpError(XmlRpcError):
    def __init__(self, status, message=None):
        self.status = status
        super().__init__(status, message or f"HTTP code {status}")


class ValueTypeError(XmlRpcError, TypeError):
    def __init__(self, index, expected, value):
        self.index = index
        self.expected = expected
        super().__init__(
            0,
            f"Value {index} is {type(value).__name__}, not {expected.__name__}"
        )
