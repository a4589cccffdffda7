"""
Request parameter collection.

Parameters come from exactly one of two sources: a list of "key=value"
tokens given on the command line, or a JSON file holding a flat object. The
result is a list of (name, value) tuples of text, in source order.
"""

from json import dumps as json_dumps, load as json_load
from logging import getLogger
from math import isfinite

from .exc import IoError, MalformedInputError, ParameterError

# pylint: disable=C0103

# Logging instance
log = getLogger("idcfsig.params")

class KeyValueSource(object):
    """
    Parameters given inline as "key=value" tokens.
    """
    def __init__(self, tokens):
        super(KeyValueSource, self).__init__()
        self.tokens = list(tokens)

    def collect(self):
        return get_parameters_from_strings(self.tokens)

    def __repr__(self):
        return "KeyValueSource(%r)" % (self.tokens,)

class JsonFileSource(object):
    """
    Parameters read from the members of a JSON object stored in a file.
    """
    def __init__(self, path):
        super(JsonFileSource, self).__init__()
        self.path = path

    def collect(self):
        return get_parameters_from_json_file(self.path)

    def __repr__(self):
        return "JsonFileSource(%r)" % (self.path,)

def get_parameter_source(keyvalues=None, input_path=None):
    """
    get_parameter_source(keyvalues, input_path) -> source or None

    Choose the parameter source from the two mutually exclusive inputs. A
    ParameterError is raised if both are given; None is returned if neither
    is.
    """
    if keyvalues and input_path is not None:
        raise ParameterError(
            "input", "cannot use key=value pairs together with an input file")

    if input_path is not None:
        return JsonFileSource(input_path)

    if keyvalues:
        return KeyValueSource(keyvalues)

    return None

def collect(source):
    """
    collect(source) -> list of (str, str)

    Gather the request parameters from source. A missing source yields an
    empty parameter list; the request then carries only the fixed fields.
    """
    if source is None:
        return []

    return source.collect()

def get_parameters_from_strings(tokens):
    """
    get_parameters_from_strings(tokens) -> list of (str, str)

    Split each "key=value" token on its first '='. Tokens without an '=' are
    dropped.
    """
    result = []
    for token in tokens:
        if "=" not in token:
            log.debug("Ignoring parameter without '=': %r", token)
            continue

        key, value = token.split("=", 1)
        result.append((key, value))

    return result

def get_parameters_from_json_file(path):
    """
    get_parameters_from_json_file(path) -> list of (str, str)

    Read a JSON object from path and turn each member into a parameter.
    String values are used as-is; all other values are converted to their
    compact JSON text (numbers, booleans, arrays and objects) and null
    becomes "null".

    An IoError is raised if the file cannot be opened or read; a
    MalformedInputError is raised if it does not hold a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as fd:
            document = json_load(fd, parse_constant=_reject_constant,
                                 parse_float=_parse_finite_float)
    except OSError as e:
        raise IoError("Unable to read %s: %s" % (path, e)) from e
    except ValueError as e:
        raise MalformedInputError("Invalid JSON in %s: %s" % (path, e)) from e

    if not isinstance(document, dict):
        raise MalformedInputError(
            "Expected a JSON object in %s, got %s" %
            (path, type(document).__name__))

    return [(key, json_value_to_text(value))
            for key, value in document.items()]

def _reject_constant(name):
    raise ValueError("%s is not valid JSON" % name)

def _parse_finite_float(text):
    value = float(text)
    if not isfinite(value):
        raise ValueError("number out of range: %s" % text)

    return value

def json_value_to_text(value):
    """
    json_value_to_text(value) -> str

    Convert a decoded JSON value into parameter text.
    """
    if isinstance(value, str):
        return value

    if value is None:
        return "null"

    # Object keys are sorted and non-ASCII text is kept as-is.
    return json_dumps(value, separators=(",", ":"), sort_keys=True,
                      ensure_ascii=False)

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
