from urllib.parse import urlsplit

from loguru import logger

from . import http_utilities
from . import xmlrpc_utilities
from . import socket_functions
from .errors import HttpError, InvalidEndpoint
from .values import DEFAULT_ZONE

DEFAULT_PORTS = {"http": 80, "https": 443}


class Endpoint(object):
    def __init__(self, url):
        parts = urlsplit(url or "")
        if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
            raise InvalidEndpoint(url)
        try:
            port = parts.port
        except ValueError:
            raise InvalidEndpoint(url)

        self.url = url
        self.secure = parts.scheme == "https"
        self.host = parts.hostname
        self.port = port or DEFAULT_PORTS[parts.scheme]
        self.path = parts.path or "/"
        if parts.query:
            self.path += "?" + parts.query

        # Value of the Host header.
        self.netloc = parts.netloc.rpartition("@")[2]


# Synchronous XML-RPC client for one endpoint. 'input_zone' is the zone
# dateTime results are read in, 'output_zone' the zone date parameters are
# written in. Remote methods are called with call() or as attributes:
#
#     client = Client("http://betty.userland.com/RPC2")
#     client.examples.getStateName(41).get_string(0)
class Client(object):
    # Client user agent.
    user_agent = "rpcxml"

    # Size of each read from the socket.
    buffer_size = 4096

    # Seconds before a blocking socket operation gives up, None waits
    # forever.
    timeout = None

    def __init__(self, url, input_zone=DEFAULT_ZONE, output_zone=DEFAULT_ZONE):
        self.endpoint = Endpoint(url)
        self.input_zone = input_zone
        self.output_zone = output_zone

    @property
    def url(self):
        return self.endpoint.url

    def call(self, method, *params):
        data = xmlrpc_utilities.write_xmlrpc_request(
            method, params, self.output_zone
        )
        data = http_utilities.wrap_http_request(
            data, self.endpoint.netloc, self.endpoint.path, self.user_agent
        )

        logger.debug(f"Calling {method} on {self.endpoint.url}")
        sock = socket_functions.open_socket(
            self.endpoint.host,
            self.endpoint.port,
            self.endpoint.secure,
            self.timeout,
        )
        with sock:
            socket_functions.send_socket(sock, data)
            data = socket_functions.read_socket(sock, self.buffer_size)

            code, _, body = http_utilities.unwrap_http_response(data)
            logger.debug(f"{method} answered HTTP {code}, {len(body)} bytes")
            if code != http_utilities.STATUS_OK:
                logger.warning(f"{method} on {self.endpoint.url} failed: HTTP {code}")
                raise HttpError(code)

            return xmlrpc_utilities.parse_response(body, self.input_zone)

    def __getattr__(self, method):
        if method.startswith("_"):
            raise AttributeError(method)
        return _Method(self, method)

    def __repr__(self):
        return f"<Client for {self.endpoint.url}>"


class _Method(object):
    # Supports dotted names such as client.system.listMethods().
    def __init__(self, client, name):
        self._client = client
        self._name = name

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return _Method(self._client, self._name + "." + name)

    def __call__(self, *args):
        return self._client.call(self._name, *args)


def connect(url, input_zone=DEFAULT_ZONE, output_zone=DEFAULT_ZONE):
    return Client(url, input_zone, output_zone)


def call(url, method, params=(), input_zone=DEFAULT_ZONE, output_zone=DEFAULT_ZONE):
    return Client(url, input_zone, output_zone).call(method, *params)
