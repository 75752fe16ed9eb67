import time

from werkzeug.exceptions import RequestTimeout
from werkzeug.serving import WSGIRequestHandler

# ----------------------------
# Upload timeout
# ----------------------------

class DeadlineStream:
    """
    Wraps wsgi.input so reads fail with 408 once the deadline has passed.

    Only read/readline are exposed; werkzeug's LimitedStream then falls back
    to plain read() calls, so every chunk of the body goes through the check.
    """

    def __init__(self, stream, deadline: float):
        self._stream = stream
        self._deadline = deadline

    def _check(self) -> None:
        if time.monotonic() >= self._deadline:
            raise RequestTimeout("Upload timed out")

    def read(self, *args):
        self._check()
        try:
            return self._stream.read(*args)
        except TimeoutError:
            raise RequestTimeout("Upload timed out")

    def readline(self, *args):
        self._check()
        try:
            return self._stream.readline(*args)
        except TimeoutError:
            raise RequestTimeout("Upload timed out")

    def close(self) -> None:
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

class UploadDeadline:
    """WSGI middleware putting a wall-clock limit on reading upload bodies."""

    def __init__(self, wsgi_app, timeout: float, path: str = "/upload"):
        self.wsgi_app = wsgi_app
        self.timeout = timeout
        self.path = path

    def __call__(self, environ, start_response):
        if environ.get("REQUEST_METHOD") == "POST" and environ.get("PATH_INFO") == self.path:
            deadline = time.monotonic() + self.timeout
            environ["wsgi.input"] = DeadlineStream(environ["wsgi.input"], deadline)
        return self.wsgi_app(environ, start_response)

def make_request_handler(timeout: float) -> type[WSGIRequestHandler]:
    """Request handler whose socket reads give up after `timeout` seconds."""

    class TimeoutRequestHandler(WSGIRequestHandler):
        pass

    TimeoutRequestHandler.timeout = timeout
    return TimeoutRequestHandler
