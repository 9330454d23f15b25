from collections.abc import Mapping
from datetime import date, datetime
from urllib.parse import quote

from ..exceptions import InvalidParameterError, PathEncodingError

# parts of URL to be omitted
SKIP_IN_PATH = (None, '', b'', [], ())

# query parameters accepted by every action
GLOBAL_PARAMS = ('pretty', 'human', 'error_trace', 'format', 'filter_path')

# arguments that end up in the path, the body or the transport options,
# never in the query string
COMMON_PARAMS = ('index', 'doc_type', 'id', 'body', 'ignore', 'request_timeout', 'headers')

# kept literal inside a path segment on top of the unreserved characters
PATH_SAFE = ',*'


def _escape(value):
    """
    Escape a single value of a URL string or a query parameter. If it is a list
    or tuple, turn it into a comma-separated string first.
    """

    # make sequences into comma-separated stings
    if isinstance(value, (list, tuple)):
        value = ','.join(_escape(v) for v in value)

    # dates and datetimes into isoformat
    elif isinstance(value, (date, datetime)):
        value = value.isoformat()

    # make bools into true/false strings
    elif isinstance(value, bool):
        value = str(value).lower()

    elif isinstance(value, bytes):
        value = value.decode('utf-8')

    elif not isinstance(value, str):
        value = str(value)

    return value


def _listify(segment):
    """
    Turn one path segment into a flat list of identifiers. Empty segments give
    an empty list, ``None`` and empty strings inside a list are dropped.
    """
    if segment in SKIP_IN_PATH:
        return []
    if isinstance(segment, (list, tuple)):
        return [item for item in segment if item not in SKIP_IN_PATH]
    return [segment]


def _quote_identifier(identifier):
    if isinstance(identifier, (list, tuple, set, Mapping)) or identifier is None:
        raise PathEncodingError('Cannot use %r as a path identifier' % (identifier,))
    try:
        identifier = _escape(identifier)
        if identifier in ('.', '..'):
            raise PathEncodingError('Dot segment %r is not a valid path identifier' % identifier)
        return quote(identifier, safe=PATH_SAFE)
    except UnicodeError as e:
        raise PathEncodingError('Cannot encode %r as a path identifier: %s' % (identifier, e))


def build_path(*segments):
    """
    Build a URL path out of identifier segments followed by a literal endpoint
    suffix, ``build_path(['i1', 'i2'], None, '_search/template')`` gives
    ``'/i1,i2/_search/template'``.

    Every segment but the last is a single identifier, a list of identifiers or
    empty. Empty segments are left out of the path altogether, lists are joined
    with commas and each identifier is percent-encoded. The last segment is
    appended as is.

    An identifier that itself contains a comma can't be told apart from a list
    on the wire; identifiers containing commas produce ambiguous results unless
    pre-escaped by the caller.
    """
    if not segments:
        return '/'
    identifiers, suffix = segments[:-1], segments[-1]

    parts = []
    for segment in identifiers:
        items = _listify(segment)
        if items:
            parts.append(','.join(_quote_identifier(item) for item in items))
    if suffix:
        parts.append(suffix.strip('/'))

    return '/' + '/'.join(p for p in parts if p)


def extract_params(arguments, allowed_params):
    """
    Return a new dict with only the entries of ``arguments`` whose key is in
    ``allowed_params``. Values are passed through untouched and anything else
    is dropped silently, the input mapping is never modified.
    """
    return dict((k, v) for k, v in arguments.items() if k in allowed_params)


def validate_params(arguments, allowed_params, action=None, exempt=COMMON_PARAMS):
    """
    Raise :class:`~esapi.elasticsearch.InvalidParameterError` for the first key
    of ``arguments`` that is neither an allowed query parameter nor in
    ``exempt``, the arguments consumed by the path, the body or the transport.
    """
    for key in arguments:
        if key not in exempt and key not in allowed_params:
            raise InvalidParameterError(action, key)
