"""
Resolve command options from parsed arguments and the environment.
"""

from logging import getLogger
import os

from .exc import ParameterError
from .signer import ResponseFormat, SCHEME_CURRENT, SCHEMES

# pylint: disable=C0103

# Environment variables consulted when an option is not given.
IDCF_API_KEY = "IDCF_API_KEY"
IDCF_SECRET_KEY = "IDCF_SECRET_KEY"
IDCF_ENDPOINT = "IDCF_ENDPOINT"
IDCF_LOG_LEVEL = "IDCF_LOG_LEVEL"

# Command-line spellings of the response formats.
RESPONSE_FORMATS = {
    "json": ResponseFormat.JSON,
    "xml": ResponseFormat.XML,
    "none": ResponseFormat.OMITTED,
}

# Logging instance
log = getLogger("idcfsig.config")

class CommandOptions(object):
    # pylint: disable=R0902,R0913
    """
    The fully-resolved options for a single API call.
    """
    def __init__(self, method, apikey, secretkey, endpoint, output_path=None,
                 response_format=ResponseFormat.JSON, scheme=SCHEME_CURRENT,
                 http_method="GET", timeout=None):
        super(CommandOptions, self).__init__()
        self.method = method
        self.apikey = apikey
        self.secretkey = secretkey
        self.endpoint = endpoint
        self.output_path = output_path
        self.response_format = response_format
        self.scheme = scheme
        self.http_method = http_method
        self.timeout = timeout

    def __repr__(self):
        # Never show the secret key.
        return ("CommandOptions(method=%r, apikey=%r, endpoint=%r, "
                "output_path=%r, response_format=%s, scheme=%r)" % (
                    self.method, self.apikey, self.endpoint, self.output_path,
                    self.response_format.name, self.scheme))

def get_command_options(args, environ=None):
    """
    get_command_options(args, environ) -> CommandOptions

    Build the command options from an argparse namespace. The API key,
    secret key and endpoint fall back to the IDCF_API_KEY, IDCF_SECRET_KEY
    and IDCF_ENDPOINT environment variables. A ParameterError is raised if a
    required value is missing from both.
    """
    if environ is None:
        environ = os.environ

    if not args.method:
        raise ParameterError("method", "you must set method option")

    apikey = _resolve(args.apikey, environ, IDCF_API_KEY, "apikey",
                      "you must set API key option or %s env variable" %
                      IDCF_API_KEY)
    secretkey = _resolve(args.secretkey, environ, IDCF_SECRET_KEY,
                         "secretkey",
                         "you must set secret key option or %s env variable" %
                         IDCF_SECRET_KEY)
    endpoint = _resolve(args.endpoint, environ, IDCF_ENDPOINT, "endpoint",
                        "you must set endpoint option or %s env variable" %
                        IDCF_ENDPOINT)

    try:
        response_format = RESPONSE_FORMATS[args.format]
    except KeyError:
        raise ParameterError("format", "unknown response format %r" %
                             (args.format,))

    scheme = SCHEMES["legacy" if args.legacy else "current"]

    options = CommandOptions(
        method=args.method, apikey=apikey, secretkey=secretkey,
        endpoint=endpoint, output_path=args.output,
        response_format=response_format, scheme=scheme,
        http_method=args.http_method, timeout=args.timeout)
    log.debug("Resolved options: %r", options)
    return options

def _resolve(value, environ, variable, name, description):
    if value is not None:
        return value

    value = environ.get(variable)
    if value is None:
        raise ParameterError(name, description)

    return value

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
