"""
Command-line entry point: idcf compute -m <command> [options].
"""

from argparse import ArgumentParser
import logging
import os
import sys

from . import __version__
from .config import IDCF_LOG_LEVEL, RESPONSE_FORMATS, get_command_options
from .dispatch import HTTP_METHODS, RequestDispatcher, open_output
from .exc import IDCFClientError, ParameterError
from .params import collect, get_parameter_source
from .signer import sign_request

# pylint: disable=C0103

_api_reference = (
    "you can get detailed API reference in "
    "https://www.idcf.jp/api-docs/apis/?id=docs_compute_reference")

# Logging instance
log = logging.getLogger("idcfsig.cli")

def create_parser():
    """
    Create the argument parser for the idcf command and its subcommands.
    """
    parser = ArgumentParser(prog="idcf", description="IDCF client")
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="subcommand", metavar="SUBCOMMAND")

    compute = subparsers.add_parser(
        "compute", help="IDCF compute API client",
        description="IDCF compute API client", epilog=_api_reference)
    compute.add_argument(
        "-a", "--apikey", metavar="API_KEY",
        help="IDCF api key, if not set, using IDCF_API_KEY environment "
             "variable")
    compute.add_argument(
        "-s", "--secretkey", metavar="SECRET_KEY",
        help="IDCF secret key, if not set, using IDCF_SECRET_KEY environment "
             "variable")
    compute.add_argument(
        "-e", "--endpoint", metavar="END_POINT",
        help="if not set, IDCF_ENDPOINT environment variable will be used")
    compute.add_argument(
        "-m", "--method", metavar="METHOD", required=True,
        help="API method name, REQUIRED")

    source = compute.add_mutually_exclusive_group()
    source.add_argument(
        "-i", "--input", dest="input_json", metavar="INPUT_JSON_FILE",
        help="input keyvalue json file (cannot use with -k)")
    source.add_argument(
        "-k", "--keyvalue", metavar="KEY_VALUE", nargs="+", action="extend",
        help="query keyvalue pair (A=B) (cannot use with -i)")

    compute.add_argument(
        "-o", "--output", metavar="OUTPUT_PATH",
        help="output file path, if not set, output to stdout")
    compute.add_argument(
        "-f", "--format", choices=sorted(RESPONSE_FORMATS), default="json",
        help="response format; 'none' omits the response field (default: "
             "json)")
    compute.add_argument(
        "--legacy", action="store_true",
        help="use the legacy signing scheme ('.' escaped, no response field)")
    compute.add_argument(
        "--http-method", choices=HTTP_METHODS, default="GET",
        help="HTTP method used to send the request (default: GET)")
    compute.add_argument(
        "--timeout", type=float, metavar="SECONDS",
        help="transport timeout in seconds (default: none)")
    compute.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="log more detail; repeat for debug output")
    compute.set_defaults(func=execute_compute)

    return parser

def configure_logging(verbosity=0, environ=None):
    """
    Set the root log level from -v flags, falling back to IDCF_LOG_LEVEL and
    then WARNING.
    """
    if environ is None:
        environ = os.environ

    unknown_level = None
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = get_log_level(environ.get(IDCF_LOG_LEVEL, "WARNING"))
        if level is None:
            unknown_level = environ[IDCF_LOG_LEVEL]
            level = logging.WARNING

    logging.basicConfig(
        level=level, stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if unknown_level is not None:
        log.warning("Unknown %s value %r; using WARNING", IDCF_LOG_LEVEL,
                    unknown_level)

    return level

def get_log_level(name):
    """
    get_log_level(name) -> int or None

    Convert a level name such as "info" to its logging level, or None if the
    name is not a known level.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        return None

    return level

def execute_compute(args, environ=None):
    """
    Run a compute API call: collect the parameters, sign the request, send
    it and stream the response to the output.
    """
    source = get_parameter_source(args.keyvalue, args.input_json)
    parameters = collect(source)
    options = get_command_options(args, environ)

    query_string, signature = sign_request(
        parameters, command=options.method, api_key=options.apikey,
        secret_key=options.secretkey, response_format=options.response_format,
        scheme=options.scheme)

    dispatcher = RequestDispatcher(
        endpoint=options.endpoint, http_method=options.http_method,
        timeout=options.timeout)

    # The output is only opened once the API has accepted the request, so a
    # rejected call leaves an existing output file untouched.
    response = dispatcher.send(query_string, signature)
    with response:
        with open_output(options.output_path) as sink:
            dispatcher.stream_to(response, sink)

def main(argv=None, environ=None):
    """
    main(argv, environ) -> int

    Parse argv (sys.argv[1:] by default), run the selected subcommand and
    return the process exit status.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        log.error("unknown subcommand")
        parser.print_usage(sys.stderr)
        return 2

    configure_logging(args.verbose, environ)

    try:
        args.func(args, environ)
    except ParameterError as e:
        print("%s: error: %s" % (parser.prog, e), file=sys.stderr)
        return 2
    except IDCFClientError as e:
        print("%s: error: %s" % (parser.prog, e), file=sys.stderr)
        return 1

    return 0

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
