"""
IDCF API request signing routines.

A request is signed by:
1. Appending the fixed fields (command, apikey and, in the current scheme,
   response) to the request parameters.
2. Sorting the parameters by name and form-url encoding each name and value
   into the canonical query string.
3. Lower-casing the canonical query string, rewriting '+' as '%20' and
   unescaping '*', '[', ']' and '.'.
4. Computing HMAC-SHA1 over the result with the secret key, then base64 and
   form-url encoding the digest.
"""

from base64 import b64encode
from enum import Enum
from hashlib import sha1
import hmac
from io import BytesIO
from logging import getLogger
from operator import itemgetter
from string import ascii_letters, digits

from .exc import ParameterError

# pylint: disable=C0103

# Bytes that are never escaped by the form-url encoder.
_form_unreserved = frozenset((ascii_letters + digits + "-_").encode("utf-8"))

# ASCII code for ' '
_ascii_space = ord(b" ")

# Query string keys
_apikey = "apikey"
_command = "command"
_response = "response"
_signature = "signature"

# Logging instance
log = getLogger("idcfsig.signer")

class ResponseFormat(Enum):
    """
    The value of the response field, which selects the body format the API
    answers with. OMITTED leaves the field out entirely, as the legacy
    scheme does. JSON is the default.
    """
    JSON = "json"
    XML = "xml"
    OMITTED = ""

class SigningScheme(object):
    """
    The revision-dependent parts of the signing scheme.

    extra_unreserved: Characters, beyond letters, digits, '-' and '_', that
        the form-url encoder leaves unescaped.
    send_response_format: Whether the response field is sent at all.
    signature_substitutions: The (old, new) replacements applied, in order,
        to the lower-cased canonical query string to produce the signature
        input.
    """
    def __init__(self, name, extra_unreserved, send_response_format,
                 signature_substitutions):
        super(SigningScheme, self).__init__()
        self.name = name
        self.extra_unreserved = extra_unreserved
        self.send_response_format = send_response_format
        self.signature_substitutions = tuple(signature_substitutions)
        self.unreserved = _form_unreserved | frozenset(
            extra_unreserved.encode("utf-8"))

    def __repr__(self):
        return "SigningScheme(%r)" % (self.name,)

# '+' must become '%20' before the escapes are undone; none of the unescape
# patterns can match inside '%20'.
_signature_substitutions = (
    ("+", "%20"),
    ("%2a", "*"),
    ("%5b", "["),
    ("%5d", "]"),
    ("%2e", "."),
)

SCHEME_CURRENT = SigningScheme(
    name="current", extra_unreserved=".", send_response_format=True,
    signature_substitutions=_signature_substitutions)

SCHEME_LEGACY = SigningScheme(
    name="legacy", extra_unreserved="", send_response_format=False,
    signature_substitutions=_signature_substitutions)

SCHEMES = {
    SCHEME_CURRENT.name: SCHEME_CURRENT,
    SCHEME_LEGACY.name: SCHEME_LEGACY,
}

class CanonicalQueryBuilder(object):
    # pylint: disable=R0902
    """
    Build the canonical query string for an API call.
    """

    def __init__(self, **kw):
        """
        CanonicalQueryBuilder(
            command: str,
            api_key: str,
            response_format: ResponseFormat=ResponseFormat.JSON,
            scheme: SigningScheme=SCHEME_CURRENT)

        Create a new CanonicalQueryBuilder instance. Properties can be
        specified as keyword arguments.

        command: The API command to invoke (listZones, deployVirtualMachine,
            etc.).
        api_key: The public API key identifying the caller.
        response_format: The response body format to request.
        scheme: The signing scheme revision to follow. If the scheme does not
            send a response format, response_format is ignored.
        """
        super(CanonicalQueryBuilder, self).__init__()
        self._command = None
        self._api_key = ""
        self._response_format = ResponseFormat.JSON
        self._scheme = SCHEME_CURRENT

        for key, value in kw.items():
            setattr(self, key, value)
        return

    @property
    def command(self):
        """
        The API command name.
        """
        return self._command

    @command.setter
    def command(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected command to be a string.")

        if not value:
            raise ParameterError("command", "you must set the API command")

        self._command = value
        return

    @property
    def api_key(self):
        """
        The public API key.
        """
        return self._api_key

    @api_key.setter
    def api_key(self, value):
        if not isinstance(value, str):
            raise TypeError("Expected api_key to be a string.")

        self._api_key = value
        return

    @property
    def response_format(self):
        """
        The requested response format.
        """
        return self._response_format

    @response_format.setter
    def response_format(self, value):
        if not isinstance(value, ResponseFormat):
            raise TypeError(
                "Expected response_format to be a ResponseFormat.")

        self._response_format = value
        return

    @property
    def scheme(self):
        """
        The signing scheme revision.
        """
        return self._scheme

    @scheme.setter
    def scheme(self, value):
        if not isinstance(value, SigningScheme):
            raise TypeError("Expected scheme to be a SigningScheme.")

        self._scheme = value
        return

    @property
    def fixed_parameters(self):
        """
        The fields added to every request.
        """
        if self.command is None:
            raise ParameterError("command", "you must set the API command")

        result = [(_command, self.command), (_apikey, self.api_key)]
        if (self.scheme.send_response_format and
                self.response_format is not ResponseFormat.OMITTED):
            result.append((_response, self.response_format.value))

        return result

    def sorted_parameters(self, parameters):
        """
        sorted_parameters(parameters) -> list of (str, str)

        The request parameters plus the fixed fields, sorted by name.
        Duplicate names are a caller error; they are kept in input order.
        """
        combined = list(parameters) + self.fixed_parameters

        seen = set()
        for name, _ in combined:
            if name in seen:
                log.warning("Duplicate parameter name %r; the API may "
                            "reject the request", name)
            seen.add(name)

        return sorted(combined, key=itemgetter(0))

    def build(self, parameters):
        """
        build(parameters) -> str

        Return the canonical query string for the given (name, value)
        parameters.
        """
        unreserved = self.scheme.unreserved
        return "&".join([
            "%s=%s" % (form_url_encode(name, unreserved),
                       form_url_encode(value, unreserved))
            for name, value in self.sorted_parameters(parameters)])

def form_url_encode(value, unreserved=SCHEME_CURRENT.unreserved):
    """
    form_url_encode(value, unreserved) -> str

    Encode value in the application/x-www-form-urlencoded style:
    * Bytes in unreserved (by default letters, digits, '-', '_' and '.')
      are left alone.
    * Space is converted to '+'.
    * Every other byte of the UTF-8 encoding becomes %XX, using upper-case
      hex digits.
    """
    result = BytesIO()

    for c in value.encode("utf-8"):
        if c in unreserved:
            result.write(bytes((c,)))
        elif c == _ascii_space:
            result.write(b"+")
        else:
            result.write(("%%%02X" % c).encode("ascii"))

    return result.getvalue().decode("ascii")

def get_signature_input(query_string, scheme=SCHEME_CURRENT):
    """
    get_signature_input(query_string, scheme) -> str

    Derive the string that is actually signed from a canonical query string:
    the whole string is lower-cased, then the scheme's substitutions are
    applied in order. Since lower-casing comes first, only the lower-case
    escape spellings need to be matched.
    """
    result = query_string.lower()
    for old, new in scheme.signature_substitutions:
        result = result.replace(old, new)

    return result

def get_signature(query_string, secret_key, scheme=SCHEME_CURRENT):
    """
    get_signature(query_string, secret_key, scheme) -> str

    Compute the signature token for a canonical query string. secret_key
    may be a str (encoded as UTF-8) or bytes. An empty key is accepted; the
    API will reject the request, but no local error is raised.
    """
    if isinstance(secret_key, str):
        secret_key = secret_key.encode("utf-8")
    elif not isinstance(secret_key, bytes):
        raise TypeError("Expected secret_key to be a string or bytes.")

    signature_input = get_signature_input(query_string, scheme)
    log.info("signature input string = %s, %s", query_string, signature_input)

    digest = hmac.new(secret_key, signature_input.encode("utf-8"),
                      sha1).digest()
    return form_url_encode(b64encode(digest).decode("ascii"),
                           scheme.unreserved)

def sign_request(parameters, command, api_key, secret_key,
                 response_format=ResponseFormat.JSON, scheme=SCHEME_CURRENT):
    """
    sign_request(parameters, command, api_key, secret_key,
                 response_format, scheme) -> (str, str)

    Build the canonical query string for a request and sign it. Returns the
    query string and the signature token.
    """
    builder = CanonicalQueryBuilder(
        command=command, api_key=api_key, response_format=response_format,
        scheme=scheme)
    query_string = builder.build(parameters)
    log.info("querystring = %s", query_string)

    return query_string, get_signature(query_string, secret_key, scheme)

def append_signature(query_string, signature):
    """
    append_signature(query_string, signature) -> str

    Append the signature token to a canonical query string.
    """
    return "%s&%s=%s" % (query_string, _signature, signature)

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
