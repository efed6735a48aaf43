import socket
import ssl


def open_socket(host, port, secure, timeout=None):
    sock = socket.create_connection((host, port), timeout)
    if not secure:
        return sock
    context = ssl.create_default_context()
    try:
        return context.wrap_socket(sock, server_hostname=host)
    except BaseException:
        sock.close()
        raise


# Reads until the peer closes the connection.
def read_socket(conn, buffer_size):
    chunks = []
    while True:
        rec = conn.recv(buffer_size)
        if not rec:
            break
        chunks.append(rec)
    return b"".join(chunks)


def send_socket(conn, data):
    size = 0
    msglen = len(data)
    while size < msglen:
        size += conn.send(data[size:])
    return size
