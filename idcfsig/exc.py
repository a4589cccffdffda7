#!/usr/bin/env python
"""
IDCF API client exceptions.
"""

class IDCFClientError(Exception):
    """
    Base class for all errors raised while preparing, signing or sending a
    request.
    """
    pass

class ParameterError(IDCFClientError):
    """
    A required option is missing, or two options conflict.
    """
    def __init__(self, name, description):
        super(ParameterError, self).__init__(
            "%s: %s" % (name, description))
        self.name = name
        self.description = description

class MalformedInputError(IDCFClientError):
    """
    The JSON parameter file could not be parsed or is not a JSON object.
    """
    pass

class IoError(IDCFClientError):
    """
    A file or stream could not be opened, read or written.
    """
    pass

class TransportError(IDCFClientError):
    """
    The HTTP request failed before a response was received (DNS, TLS,
    connection or timeout failures).
    """
    pass

class RemoteRejectionError(IDCFClientError):
    """
    The API endpoint answered with a non-2xx status.
    """
    def __init__(self, status_code, body):
        super(RemoteRejectionError, self).__init__(
            "response error: %d, %s" % (status_code, body))
        self.status_code = status_code
        self.body = body

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
