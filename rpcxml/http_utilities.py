import re

from .errors import HttpError

LF_NUM = 10
CR_NUM = 13
SP_NUM = 32
FINISH_LINE = "\r\n"

STATUS_OK = 200

# Status used when the response can not be read as HTTP at all.
MALFORMED = 0


def malformed(reason):
    return HttpError(MALFORMED, "Malformed HTTP response: " + reason)


# Reads characters until reaching 'char'. Returns the text read and the
# position right after 'char'.
def read_chars_until(data, pos, char):
    try:
        new_pos = data.index(char, pos)
    except ValueError:
        raise malformed(f"expected {chr(char)!r}")
    read = data[pos:new_pos].decode("latin-1")
    return [read, new_pos + 1]


def read_line(data, pos):
    ret = read_chars_until(data, pos, CR_NUM)
    pos = ret[1]
    if pos >= len(data) or data[pos] != LF_NUM:
        raise malformed("line not ended by CRLF")
    return [ret[0], pos + 1]


def read_headers(data, pos):
    headers = {}
    while True:
        ret = read_line(data, pos)
        line = ret[0]
        pos = ret[1]
        if line == "":
            return [headers, pos]
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise malformed(f"bad header line {line!r}")
        headers[name.strip().lower()] = value.strip()


def read_chunked(data, pos):
    body = b""
    while True:
        ret = read_line(data, pos)
        pos = ret[1]
        size = ret[0].split(";", 1)[0].strip()
        try:
            size = int(size, 16)
        except ValueError:
            raise malformed(f"bad chunk size {size!r}")
        if size == 0:
            return body
        if pos + size > len(data):
            raise malformed("truncated chunk")
        body += data[pos:pos + size]
        pos += size + 2


# Splits a raw HTTP response in its status code, headers and body. Data
# has to be given in bytes.
def unwrap_http_response(data):
    pos = 0

    # Version.
    ret = read_chars_until(data, pos, SP_NUM)
    if not re.fullmatch(r"HTTP/\d\.\d", ret[0]):
        raise malformed(f"bad version {ret[0]!r}")
    pos = ret[1]

    # Status code and reason phrase.
    ret = read_line(data, pos)
    code = ret[0].split(" ", 1)[0]
    if not code.isdigit() or not 100 <= int(code) < 600:
        raise malformed(f"bad status code {code!r}")
    code = int(code)
    pos = ret[1]

    ret = read_headers(data, pos)
    headers = ret[0]
    pos = ret[1]

    if headers.get("transfer-encoding", "").lower() == "chunked":
        body = read_chunked(data, pos)
    elif "content-length" in headers:
        try:
            length = int(headers["content-length"])
        except ValueError:
            raise malformed("bad Content-Length")
        body = data[pos:pos + length]
        if len(body) != length:
            raise malformed("body shorter than Content-Length")
    else:
        body = data[pos:]

    return code, headers, body


# Builds the HTTP POST request carrying the XML-RPC message 'data'.
def wrap_http_request(data, host, path, user_agent):
    ret = "POST " + path + " HTTP/1.1" + FINISH_LINE
    ret += "Host: " + host + FINISH_LINE
    ret += "Connection: close" + FINISH_LINE
    ret += "User-Agent: " + user_agent + FINISH_LINE
    ret += "Content-Type: text/xml" + FINISH_LINE
    ret += "Content-Length: " + str(len(data)) + FINISH_LINE
    ret += FINISH_LINE
    ret = ret.encode("latin-1")
    ret += data
    return ret
