"""
Declarative table of the API actions the client exposes.

Each :class:`Action` says which HTTP method the action uses, which arguments
make up its path, the literal endpoint appended to that path and the query
parameters the server accepts for it. Importing this module registers every
action's parameters in :data:`~esapi.elasticsearch.client.registry.PARAMS_REGISTRY`
and freezes it; the client turns every entry into a method.
"""
from collections import namedtuple
from types import MappingProxyType

from .registry import PARAMS_REGISTRY
from .utils import (SKIP_IN_PATH, GLOBAL_PARAMS, build_path, extract_params,
                    validate_params)

Action = namedtuple('Action', 'name method parts suffix params required signature ndjson doc')

Request = namedtuple('Request', 'method path params body options')

# arguments handed to the transport rather than to the server
TRANSPORT_OPTIONS = ('ignore', 'request_timeout', 'headers')

# python keywords can't be used as argument names, accept them with a trailing _
RESERVED_PARAMS = {'from_': 'from'}

NDJSON_CONTENT_TYPE = 'application/x-ndjson'

_SOURCE_PARAMS = ('_source', '_source_exclude', '_source_include')
_INDICES_PARAMS = ('allow_no_indices', 'expand_wildcards', 'ignore_unavailable')
_QUERY_STRING_PARAMS = ('analyze_wildcard', 'analyzer', 'default_operator', 'df',
                        'lenient', 'q')
_GET_PARAMS = _SOURCE_PARAMS + ('parent', 'preference', 'realtime', 'refresh',
                                'routing', 'version', 'version_type')
_BY_QUERY_PARAMS = _SOURCE_PARAMS + _INDICES_PARAMS + _QUERY_STRING_PARAMS + (
    'conflicts', 'from_', 'preference', 'refresh', 'request_cache',
    'requests_per_second', 'routing', 'scroll', 'scroll_size', 'search_timeout',
    'search_type', 'size', 'slices', 'sort', 'stats', 'terminate_after', 'timeout',
    'version', 'wait_for_active_shards', 'wait_for_completion')


def _action(name, method, parts=(), suffix='', params=(), required=(),
            signature=None, ndjson=False, doc=''):
    if signature is None:
        signature = parts
    return Action(name, method, tuple(parts), suffix, tuple(params),
                  tuple(required), tuple(signature), ndjson, doc)


ACTIONS = (
    _action('info', 'GET',
            doc='Get the basic info from the current cluster.'),
    _action('ping', 'HEAD',
            doc='Returns True if the cluster is up, False otherwise.'),
    _action('search', 'GET', ('index', 'doc_type'), '_search',
            _SOURCE_PARAMS + _INDICES_PARAMS + _QUERY_STRING_PARAMS + (
                'batched_reduce_size', 'docvalue_fields', 'explain', 'from_',
                'max_concurrent_shard_requests', 'pre_filter_shard_size',
                'preference', 'request_cache', 'rest_total_hits_as_int',
                'routing', 'scroll', 'search_type', 'size', 'sort', 'stats',
                'stored_fields', 'suggest_field', 'suggest_mode', 'suggest_size',
                'suggest_text', 'terminate_after', 'timeout', 'track_scores',
                'track_total_hits', 'typed_keys', 'version'),
            signature=('index', 'doc_type', 'body'),
            doc='Execute a search query and get back search hits that match the query.'),
    _action('search_template', 'GET', ('index', 'doc_type'), '_search/template',
            _INDICES_PARAMS + ('explain', 'preference', 'profile', 'routing',
                               'scroll', 'search_type', 'typed_keys',
                               'rest_total_hits_as_int'),
            signature=('index', 'doc_type', 'body'),
            doc='Run a search with a mustache template and the params to fill it in with.'),
    _action('msearch', 'GET', ('index', 'doc_type'), '_msearch',
            ('max_concurrent_searches', 'max_concurrent_shard_requests',
             'pre_filter_shard_size', 'rest_total_hits_as_int', 'search_type',
             'typed_keys'),
            required=('body',), signature=('body', 'index', 'doc_type'), ndjson=True,
            doc='Execute several search requests within the same API call.'),
    _action('msearch_template', 'GET', ('index', 'doc_type'), '_msearch/template',
            ('max_concurrent_searches', 'rest_total_hits_as_int', 'search_type',
             'typed_keys'),
            required=('body',), signature=('body', 'index', 'doc_type'), ndjson=True,
            doc='Execute several templated search requests within the same API call.'),
    _action('count', 'GET', ('index', 'doc_type'), '_count',
            _INDICES_PARAMS + _QUERY_STRING_PARAMS + (
                'min_score', 'preference', 'routing', 'terminate_after'),
            signature=('index', 'doc_type', 'body'),
            doc='Get the number of documents matching a query.'),
    _action('search_shards', 'GET', ('index', 'doc_type'), '_search_shards',
            _INDICES_PARAMS + ('local', 'preference', 'routing'),
            doc='Get the indices and shards a search request would be executed against.'),
    _action('field_caps', 'GET', ('index',), '_field_caps',
            _INDICES_PARAMS + ('fields',),
            signature=('index', 'body'),
            doc='Get the capabilities of fields among multiple indices.'),
    _action('explain', 'GET', ('index', 'doc_type', 'id'), '_explain',
            _SOURCE_PARAMS + _QUERY_STRING_PARAMS + (
                'parent', 'preference', 'routing', 'stored_fields'),
            required=('index', 'doc_type', 'id'),
            signature=('index', 'doc_type', 'id', 'body'),
            doc='Compute a score explanation for a query and a specific document.'),
    _action('get', 'GET', ('index', 'doc_type', 'id'), '',
            _GET_PARAMS + ('stored_fields',),
            required=('index', 'doc_type', 'id'),
            doc='Get a typed JSON document from the index based on its id.'),
    _action('get_source', 'GET', ('index', 'doc_type', 'id'), '_source',
            _GET_PARAMS,
            required=('index', 'doc_type', 'id'),
            doc='Get the source of a document by its index, type and id.'),
    _action('exists', 'HEAD', ('index', 'doc_type', 'id'), '',
            _GET_PARAMS + ('stored_fields',),
            required=('index', 'doc_type', 'id'),
            doc='Returns a boolean indicating whether or not given document exists.'),
    _action('exists_source', 'HEAD', ('index', 'doc_type', 'id'), '_source',
            _GET_PARAMS,
            required=('index', 'doc_type', 'id'),
            doc='Returns a boolean indicating whether or not the source of a document exists.'),
    _action('mget', 'GET', ('index', 'doc_type'), '_mget',
            _SOURCE_PARAMS + ('preference', 'realtime', 'refresh', 'routing',
                              'stored_fields'),
            required=('body',), signature=('body', 'index', 'doc_type'),
            doc='Get multiple documents based on an index, type (optional) and ids.'),
    _action('index', 'POST', ('index', 'doc_type', 'id'), '',
            ('op_type', 'parent', 'pipeline', 'refresh', 'routing', 'timeout',
             'version', 'version_type', 'wait_for_active_shards'),
            required=('index', 'doc_type', 'body'),
            signature=('index', 'doc_type', 'body', 'id'),
            doc='Add or update a typed JSON document in a specific index, making it searchable.'),
    _action('create', 'PUT', ('index', 'doc_type', 'id'), '_create',
            ('parent', 'pipeline', 'refresh', 'routing', 'timeout', 'version',
             'version_type', 'wait_for_active_shards'),
            required=('index', 'doc_type', 'id', 'body'),
            signature=('index', 'doc_type', 'id', 'body'),
            doc='Add a typed JSON document in a specific index, failing if the id already exists.'),
    _action('update', 'POST', ('index', 'doc_type', 'id'), '_update',
            _SOURCE_PARAMS + ('fields', 'lang', 'parent', 'refresh',
                              'retry_on_conflict', 'routing', 'timeout', 'version',
                              'version_type', 'wait_for_active_shards'),
            required=('index', 'doc_type', 'id'),
            signature=('index', 'doc_type', 'id', 'body'),
            doc='Update a document with a script or partial document.'),
    _action('delete', 'DELETE', ('index', 'doc_type', 'id'), '',
            ('parent', 'refresh', 'routing', 'timeout', 'version', 'version_type',
             'wait_for_active_shards'),
            required=('index', 'doc_type', 'id'),
            doc='Delete a typed JSON document from a specific index based on its id.'),
    _action('delete_by_query', 'POST', ('index', 'doc_type'), '_delete_by_query',
            _BY_QUERY_PARAMS,
            required=('index', 'body'), signature=('index', 'body', 'doc_type'),
            doc='Delete all documents matching a query.'),
    _action('update_by_query', 'POST', ('index', 'doc_type'), '_update_by_query',
            _BY_QUERY_PARAMS + ('pipeline', 'version_type'),
            required=('index',), signature=('index', 'doc_type', 'body'),
            doc='Perform an update on every document matching a query.'),
    _action('termvectors', 'GET', ('index', 'doc_type', 'id'), '_termvectors',
            ('field_statistics', 'fields', 'offsets', 'parent', 'payloads',
             'positions', 'preference', 'realtime', 'routing', 'term_statistics',
             'version', 'version_type'),
            required=('index', 'doc_type'),
            signature=('index', 'doc_type', 'id', 'body'),
            doc='Get information and statistics about terms in the fields of a document.'),
)

ACTIONS_BY_NAME = MappingProxyType(dict((a.name, a) for a in ACTIONS))


def register_actions(registry, actions=ACTIONS):
    """ Register the parameters of ``actions`` and freeze ``registry``. """
    for action in actions:
        registry.register(action.name, action.params)
    registry.freeze()


def bind_arguments(action, args, kwargs):
    """
    Merge the positional arguments of a call into its keyword arguments,
    following the action's signature.
    """
    if len(args) > len(action.signature):
        raise TypeError('%s() takes at most %d positional arguments (%d given)' % (
            action.name, len(action.signature), len(args)))
    arguments = dict(kwargs)
    for name, value in zip(action.signature, args):
        if name in arguments:
            raise TypeError("%s() got multiple values for argument '%s'" % (action.name, name))
        arguments[name] = value
    return arguments


def build_request(action, arguments, registry=PARAMS_REGISTRY, strict=False):
    """
    Turn the arguments of one call into a :class:`Request`.

    :arg action: the :class:`Action` being called
    :arg arguments: mapping of the call's arguments, left untouched
    :arg registry: where the action's allowed parameters are looked up
    :arg strict: raise :class:`~esapi.elasticsearch.InvalidParameterError` on
        unsupported arguments instead of dropping them
    """
    allowed = registry.get(action.name) + GLOBAL_PARAMS

    for field in action.required:
        if arguments.get(field) in SKIP_IN_PATH:
            raise ValueError("Empty value passed for a required argument '%s'." % field)

    if strict:
        exempt = action.parts + ('body', ) + TRANSPORT_OPTIONS
        validate_params(arguments, allowed, action.name, exempt)

    params = extract_params(arguments, allowed)
    for name, wire_name in RESERVED_PARAMS.items():
        if name in params:
            params[wire_name] = params.pop(name)

    segments = dict((part, arguments.get(part)) for part in action.parts)
    # a type without an index would be read as an index name
    if 'index' in segments and segments['index'] in SKIP_IN_PATH \
            and segments.get('doc_type') not in SKIP_IN_PATH:
        segments['index'] = '_all'
    path = build_path(*([segments[part] for part in action.parts] + [action.suffix]))

    options = dict((k, arguments[k]) for k in TRANSPORT_OPTIONS if k in arguments)
    if action.ndjson:
        headers = dict(options.get('headers') or {})
        headers.setdefault('content-type', NDJSON_CONTENT_TYPE)
        options['headers'] = headers

    return Request(action.method, path, params, arguments.get('body'), options)


def _docstring(action):
    template = '/' + '/'.join(['{%s}' % p for p in action.parts] + ([action.suffix] if action.suffix else []))
    lines = [action.doc, '', '``%s %s``' % (action.method, template), '']
    lines.extend(':arg %s:' % name for name in action.signature)
    if action.params:
        lines.append('')
        lines.append('Query parameters: %s' % ', '.join(action.params))
    return '\n'.join(lines)


def action_method(action):
    """ Build the client method performing ``action``. """

    def _perform_action(self, *args, **kwargs):
        return self._perform(action, bind_arguments(action, args, kwargs))

    _perform_action.__name__ = action.name
    _perform_action.__qualname__ = 'Elasticsearch.%s' % action.name
    _perform_action.__doc__ = _docstring(action)
    return _perform_action


register_actions(PARAMS_REGISTRY)
