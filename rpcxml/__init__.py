from loguru import logger

from .client import Client, connect, call
from .errors import (
    XmlRpcError,
    UnsupportedType,
    InvalidMethodName,
    InvalidEndpoint,
    ResponseParseError,
    XmlParseError,
    DateParseError,
    NumberParseError,
    Base64ParseError,
    Fault,
    UndefinedFault,
    HttpError,
    ValueTypeError,
)
from .values import Response, Value, DEFAULT_ZONE
from .xmlrpc_utilities import (
    MethodCall,
    encode_parameters,
    build_request,
    decode_response,
    parse_response,
)

# Applications opt in with logger.enable("rpcxml").
logger.disable("rpcxml")
