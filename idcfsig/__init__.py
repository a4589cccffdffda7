#!/usr/bin/env python
"""
IDCF API request signing and client.
"""

__version__ = "0.1.0"

from .exc import (
    IDCFClientError, IoError, MalformedInputError, ParameterError,
    RemoteRejectionError, TransportError)
from .params import (
    JsonFileSource, KeyValueSource, collect, get_parameter_source)
from .signer import (
    CanonicalQueryBuilder, ResponseFormat, SCHEME_CURRENT, SCHEME_LEGACY,
    SigningScheme, form_url_encode, get_signature, get_signature_input,
    sign_request)
from .dispatch import RequestDispatcher, build_request_url

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
