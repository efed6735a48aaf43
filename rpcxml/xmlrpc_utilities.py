import xml.etree.ElementTree as ET
from collections.abc import Mapping
from datetime import datetime, date
import binascii
import base64
import re

from loguru import logger

from . import values as V
from .errors import (
    Base64ParseError,
    DateParseError,
    Fault,
    InvalidMethodName,
    NumberParseError,
    UndefinedFault,
    UnsupportedType,
    XmlParseError,
)
from .values import Response, DEFAULT_ZONE

INTEGER_PATTERN = re.compile(r"[+-]?\d+")


# -------------------
# |     Writing     |
# |       of        |
# |     messages    |
# -------------------


def escape_string(text):
    # Only '&' and '<' are escaped, '>' and quotes are written as they are.
    return text.replace("&", "&amp;").replace("<", "&lt;")


def format_datetime(moment, zone):
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(zone)
    else:
        moment = datetime(moment.year, moment.month, moment.day)
    return (
        f"{moment.year:04d}{moment.month:02d}{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


# Appends to 'out' the contents of a 'value' tag for 'info'. The
# 'value' tag itself is written by the caller.
def write_value(info, zone, out):
    if isinstance(info, str):
        out.append("<string>" + escape_string(info) + "</string>")
    elif isinstance(info, bool):
        out.append("<boolean>" + ("1" if info else "0") + "</boolean>")
    elif isinstance(info, int):
        if info < V.INT_MIN or info > V.INT_MAX:
            raise UnsupportedType(info)
        out.append("<int>" + "%d" % info + "</int>")
    elif isinstance(info, float):
        out.append("<double>" + repr(float(info)) + "</double>")
    elif isinstance(info, date):
        out.append(
            "<dateTime.iso8601>" + format_datetime(info, zone)
            + "</dateTime.iso8601>"
        )
    elif isinstance(info, (bytes, bytearray)):
        out.append("<base64>" + base64.b64encode(info).decode("ascii") + "</base64>")
    elif isinstance(info, Mapping):
        out.append("<struct>")
        for key, item in info.items():
            # Non textual keys have no representation in a struct.
            if not isinstance(key, str):
                continue
            out.append("<member><name>" + key + "</name><value>")
            write_value(item, zone, out)
            out.append("</value></member>")
        out.append("</struct>")
    elif isinstance(info, (list, tuple)):
        out.append("<array><data>")
        for item in info:
            out.append("<value>")
            write_value(item, zone, out)
            out.append("</value>")
        out.append("</data></array>")
    else:
        raise UnsupportedType(info)
    return out


# Returns the '<param>' fragments for every parameter, in order.
def encode_parameters(params, output_zone=DEFAULT_ZONE):
    out = []
    for param in params:
        out.append("<param><value>")
        write_value(param, output_zone, out)
        out.append("</value></param>")
    return "".join(out)


def validate_method_name(method_name):
    if not method_name:
        raise InvalidMethodName(method_name)
    return method_name


# Wraps encoded parameters in a methodCall document. The method name
# goes in verbatim.
def build_request(method_name, encoded_params):
    validate_method_name(method_name)
    return (
        '<?xml version="1.0"?><methodCall>'
        + "<methodName>" + method_name + "</methodName>"
        + "<params>" + encoded_params + "</params>"
        + "</methodCall>"
    )


class MethodCall(object):
    def __init__(self, name, params=()):
        self.name = validate_method_name(name)
        self.params = tuple(params)

    def to_xml(self, output_zone=DEFAULT_ZONE):
        return build_request(
            self.name, encode_parameters(self.params, output_zone)
        )

    def to_bytes(self, output_zone=DEFAULT_ZONE):
        return self.to_xml(output_zone).encode("utf-8")

    def __repr__(self):
        return f"MethodCall({self.name!r}, {list(self.params)!r})"


# Request body ready to be sent, as UTF-8 bytes.
def write_xmlrpc_request(method, params, output_zone=DEFAULT_ZONE):
    return MethodCall(method, params).to_bytes(output_zone)


# -------------------
# |     Reading     |
# |       of        |
# |     messages    |
# -------------------


def element_text(elem):
    return "".join(elem.itertext())


def read_string(elem, zone):
    return element_text(elem)


def read_int(elem, zone):
    text = element_text(elem).strip()
    if not INTEGER_PATTERN.fullmatch(text):
        raise NumberParseError(f"Invalid integer: {text!r}")
    number = int(text)
    if number < V.INT_MIN or number > V.INT_MAX:
        raise NumberParseError(f"Integer out of range: {text}")
    return number


def read_double(elem, zone):
    text = element_text(elem).strip()
    try:
        return float(text)
    except ValueError as ex:
        raise NumberParseError(f"Invalid double: {text!r}") from ex


def read_boolean(elem, zone):
    return element_text(elem) == "1"


def read_base64(elem, zone):
    text = element_text(elem).strip()
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as ex:
        raise Base64ParseError(f"Invalid base64 data: {ex}") from ex


def read_datetime(elem, zone):
    text = element_text(elem).strip()
    try:
        moment = datetime.strptime(text, V.DATE_FORMAT)
    except ValueError as ex:
        raise DateParseError(f"Invalid dateTime.iso8601: {text!r}") from ex
    return moment.replace(tzinfo=zone)


# Members without a name or without a usable value are left out.
def read_struct(elem, zone):
    ret = {}
    for member in elem.findall(V.MEMBER):
        name = member.find(V.NAME)
        value = member.find(V.VALUE)
        if name is None or value is None:
            continue
        value = read_value(value, zone)
        if value is not None:
            ret[element_text(name)] = value
    return ret


def read_array(elem, zone):
    data = elem.find(V.DATA)
    if data is None:
        return []
    return [read_value(value, zone) for value in data.findall(V.VALUE)]


READERS = {
    V.STRING: read_string,
    V.INT: read_int,
    V.I4: read_int,
    V.DOUBLE: read_double,
    V.BOOLEAN: read_boolean,
    V.BASE64: read_base64,
    V.STRUCT: read_struct,
    V.ARRAY: read_array,
    V.DATETIME: read_datetime,
}


# Reads a 'value' tag. The first child with a known type tag decides the
# result, None is returned when there is no such child.
def read_value(value, zone=DEFAULT_ZONE):
    for child in value:
        reader = READERS.get(child.tag)
        if reader is not None:
            return reader(child, zone)
    return None


# Raises the fault carried by a value tag inside <fault>.
def read_fault(value, zone):
    payload = read_value(value, zone)
    if type(payload) is not dict:
        raise UndefinedFault(payload)

    code = payload.get("faultCode")
    message = payload.get("faultString")
    if type(code) is not int or type(message) is not str:
        raise UndefinedFault(payload)

    logger.debug(f"Fault response {code}: {message}")
    raise Fault(code, message)


# Decodes an already parsed methodResponse. A fault anywhere in the
# document wins over the params.
def decode_response(root, input_zone=DEFAULT_ZONE):
    if isinstance(root, ET.ElementTree):
        root = root.getroot()

    fault = next(root.iter(V.FAULT), None)
    if fault is not None:
        value = next(fault.iter(V.VALUE), None)
        # An empty fault carries nothing to report and no params either.
        if value is None:
            logger.debug("Fault response without value")
            return Response()
        read_fault(value, input_zone)

    ret = []
    for position, param in enumerate(root.iter(V.PARAM)):
        value = param.find(V.VALUE)
        if value is None:
            continue
        value = read_value(value, input_zone)
        if value is None:
            logger.debug(f"Skipping param {position}: no known value type")
            continue
        ret.append(value)
    return Response(ret)


def parse_response(data, input_zone=DEFAULT_ZONE):
    try:
        root = ET.fromstring(data)
    except ET.ParseError as ex:
        raise XmlParseError(f"XML parser error: {ex}") from ex
    return decode_response(root, input_zone)
