import socket
from threading import Thread

import pytest


# HTTP server answering every connection with 'response'. The raw bytes
# of each request received are kept in 'requests'.
class CannedServer(object):
    buffer_size = 1024

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(5)
        self.port = self.sock.getsockname()[1]
        self.requests = []
        self.response = b""
        self.thread = Thread(target=self.serve, daemon=True)
        self.thread.start()

    @property
    def url(self):
        return f"http://127.0.0.1:{self.port}/RPC2"

    def reply(self, body, code=200, phrase="OK", chunked=False):
        if isinstance(body, str):
            body = body.encode("utf-8")
        head = f"HTTP/1.1 {code} {phrase}\r\nContent-Type: text/xml\r\n"
        if chunked:
            middle = len(body) // 2
            parts = [body[:middle], body[middle:]]
            body = b"".join(
                b"%x\r\n" % len(part) + part + b"\r\n" for part in parts if part
            ) + b"0\r\n\r\n"
            head += "Transfer-Encoding: chunked\r\n"
        else:
            head += f"Content-Length: {len(body)}\r\n"
        self.response = (head + "\r\n").encode("latin-1") + body

    def read_request(self, conn):
        data = b""
        while b"\r\n\r\n" not in data:
            rec = conn.recv(self.buffer_size)
            if not rec:
                return data
            data += rec
        head, _, body = data.partition(b"\r\n\r\n")
        length = 0
        for line in head.split(b"\r\n")[1:]:
            name, _, value = line.partition(b":")
            if name.strip().lower() == b"content-length":
                length = int(value.strip())
        while len(body) < length:
            rec = conn.recv(self.buffer_size)
            if not rec:
                break
            body += rec
        return head + b"\r\n\r\n" + body

    def serve(self):
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            with conn:
                self.requests.append(self.read_request(conn))
                conn.sendall(self.response)
                conn.shutdown(socket.SHUT_WR)

    def shutdown(self):
        self.sock.close()


@pytest.fixture
def server():
    serv = CannedServer()
    yield serv
    serv.shutdown()
