"""
Send a signed request to the API endpoint and stream the response.
"""

from contextlib import contextmanager
from logging import getLogger
import sys

import requests

from .exc import IoError, RemoteRejectionError, TransportError
from .signer import append_signature

# pylint: disable=C0103

# Size of the chunks the response body is copied in.
_chunk_size = 4096

# HTTP methods the API accepts; parameters always travel in the query string.
HTTP_METHODS = ("GET", "POST")

# Logging instance
log = getLogger("idcfsig.dispatch")

class RequestDispatcher(object):
    """
    Issue a signed API request and copy the response body to a sink.
    """

    def __init__(self, **kw):
        """
        RequestDispatcher(
            endpoint: str,
            http_method: str="GET",
            timeout: Optional[float]=None)

        endpoint: The API endpoint URL, without a query string.
        http_method: GET or POST.
        timeout: Passed through to requests; None waits indefinitely.
        """
        super(RequestDispatcher, self).__init__()
        self._endpoint = None
        self._http_method = "GET"
        self._timeout = None

        for key, value in kw.items():
            setattr(self, key, value)
        return

    @property
    def endpoint(self):
        """
        The API endpoint URL.
        """
        return self._endpoint

    @endpoint.setter
    def endpoint(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected endpoint to be a string.")

        self._endpoint = value
        return

    @property
    def http_method(self):
        """
        The HTTP method used to send the request.
        """
        return self._http_method

    @http_method.setter
    def http_method(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected http_method to be a string.")

        value = value.upper()
        if value not in HTTP_METHODS:
            raise ValueError("Unsupported HTTP method: %r" % value)

        self._http_method = value
        return

    @property
    def timeout(self):
        """
        The transport timeout, in seconds, or None.
        """
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        if value is not None:
            if not isinstance(value, (int, float)):
                raise TypeError("Expected timeout to be a number.")

            if value <= 0:
                raise ValueError("timeout must be positive.")

        self._timeout = value
        return

    def request_url(self, query_string, signature):
        """
        The full URL for a signed request.
        """
        if self.endpoint is None:
            raise ValueError("endpoint has not been set.")

        return build_request_url(self.endpoint, query_string, signature)

    def send(self, query_string, signature):
        """
        send(query_string, signature) -> requests.Response

        Send the request and return the streaming response once its status
        has been checked. The caller must close the response.

        A TransportError is raised if no response is received and a
        RemoteRejectionError if the response status is not 2xx.
        """
        url = self.request_url(query_string, signature)

        try:
            response = requests.request(
                self.http_method, url, stream=True, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            log.error("request error: %s", e)
            raise TransportError(str(e)) from e

        if not (200 <= response.status_code < 300):
            with response:
                log.error("response error: %d", response.status_code)
                raise RemoteRejectionError(response.status_code, response.text)

        log.info("request success: %d", response.status_code)
        return response

    def stream_to(self, response, sink):
        """
        stream_to(response, sink) -> None

        Copy the response body, unmodified, to the binary file-like object
        sink, then close the response. An IoError is raised if the sink
        cannot be written.
        """
        with response:
            try:
                for chunk in response.iter_content(chunk_size=_chunk_size):
                    sink.write(chunk)
                sink.flush()
            except requests.exceptions.RequestException as e:
                raise TransportError(str(e)) from e
            except OSError as e:
                raise IoError("Unable to write response: %s" % e) from e

        return

    def dispatch(self, query_string, signature, sink):
        """
        dispatch(query_string, signature, sink) -> None

        Send the request and write the response body to sink. Nothing is
        written unless the status is 2xx.
        """
        response = self.send(query_string, signature)
        self.stream_to(response, sink)
        return

def build_request_url(endpoint, query_string, signature):
    """
    build_request_url(endpoint, query_string, signature) -> str

    Assemble endpoint?query_string&signature=token. The query string and
    signature are already encoded and are used verbatim.
    """
    return "%s?%s" % (endpoint, append_signature(query_string, signature))

@contextmanager
def open_output(path=None):
    """
    open_output(path) -> context manager yielding a binary file

    Open path for writing, or use standard output if path is None. An
    IoError is raised if the file cannot be created.
    """
    if path is None:
        yield sys.stdout.buffer
        return

    try:
        fd = open(path, "wb")
    except OSError as e:
        raise IoError("Unable to create %s: %s" % (path, e)) from e

    with fd:
        yield fd

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
