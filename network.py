import logging
import queue
import socket
import threading

import settings

logger = logging.getLogger('slowpoke.client')
logger.addHandler(logging.NullHandler())


class Network:
    """Simple TCP client with a background receiver thread.

    - connect() performs the blocking connect.
    - After connecting, a background thread reads server status lines and
      buffers them into an internal queue. get_lines() returns every buffered
      line in order (non-blocking), wait_line() blocks for the next one.
    - closed becomes True once the server has closed the connection, which is
      how a client learns that the round ended.
    """

    def __init__(self, server_ip, server_port, timeout=5.0):
        self.client = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server = server_ip
        self.port = server_port
        self.addr = (self.server, self.port)
        self.timeout = timeout
        self.connect()

        self._inbox = queue.Queue()
        self._closed = threading.Event()
        self._recv_thread_stop = threading.Event()
        self._recv_thread = threading.Thread(target=self._recv_loop, daemon=True)
        self._recv_thread.start()

    def connect(self):
        self.client.settimeout(self.timeout)
        self.client.connect(self.addr)
        self.client.settimeout(None)
        self.client.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        logger.info("Connected to %s:%s", self.server, self.port)

    def _recv_loop(self):
        pending = b''
        while not self._recv_thread_stop.is_set():
            try:
                data = self.client.recv(4096)
            except OSError as e:
                logger.debug("Receive failed: %s", e)
                break
            if not data:
                # remote closed
                break
            pending += data
            while b'\n' in pending:
                line, pending = pending.split(b'\n', 1)
                self._inbox.put(line.decode('ascii', errors='replace'))
        self._closed.set()
        # wake up a blocked wait_line()
        self._inbox.put(None)
        logger.info("Server closed the connection")

    def send(self, data=b'.'):
        if isinstance(data, str):
            data = data.encode('utf-8')
        try:
            self.client.sendall(data)
            return True
        except OSError as e:
            logger.debug("Send failed: %s", e)
            return False

    def get_lines(self):
        lines = []
        try:
            while True:
                line = self._inbox.get_nowait()
                if line is not None:
                    lines.append(line)
        except queue.Empty:
            return lines

    def wait_line(self, timeout=None):
        """Block until a line arrives; None on timeout or once the server closed."""
        if self.closed and self._inbox.empty():
            return None
        try:
            return self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None

    @property
    def closed(self):
        return self._closed.is_set()

    def close(self):
        self._recv_thread_stop.set()
        try:
            self.client.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.client.close()


if __name__ == "__main__":
    n = Network(settings.server or '127.0.0.1', settings.port)
    print(n.wait_line(timeout=5.0))
    n.close()
