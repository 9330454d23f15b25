import itertools
from collections import namedtuple

from .connection import Urllib3HttpConnection
from .serializer import JSONSerializer, Deserializer, DEFAULT_SERIALIZERS
from .exceptions import ImproperlyConfigured, TransportError


Response = namedtuple('Response', 'status headers body')


class Transport(object):
    """
    Encapsulation of transport-related logic. Handles instantiation of the
    individual connections and serializing/deserializing the data passing
    through them.

    Requests are handed to the connections in turn. Nothing is retried and no
    nodes are discovered: a failed request raises straight away.

    Main interface is the `perform_request` method.
    """

    def __init__(self, hosts, connection_class=Urllib3HttpConnection,
                 serializer=JSONSerializer(), serializers=None,
                 default_mimetype='application/json', **kwargs):
        """
        :arg hosts: list of dictionaries, each containing keyword arguments to
            create a `connection_class` instance
        :arg connection_class: subclass of :class:`~esapi.elasticsearch.Connection` to use
        :arg serializer: serializer instance
        :arg serializers: optional dict of serializer instances that will be
            used for deserializing data coming from the server. (key is the mimetype)
        :arg default_mimetype: when no mimetype is specified by the server
            response assume this mimetype, defaults to `'application/json'`

        Any extra keyword arguments will be passed to the `connection_class`
        when creating and instance unless overridden by that connection's
        options provided as part of the hosts parameter.
        """
        # serialization config
        _serializers = DEFAULT_SERIALIZERS.copy()
        # if a serializer has been specified, use it for deserialization as well
        _serializers[serializer.mimetype] = serializer
        # if custom serializers map has been supplied, override the defaults with it
        if serializers:
            _serializers.update(serializers)
        # create a deserializer with our config
        self.deserializer = Deserializer(_serializers, default_mimetype)

        self.serializer = serializer
        self.connection_class = connection_class
        self.kwargs = kwargs
        self.hosts = hosts

        self.set_connections(hosts)

    def _create_connection(self, host):
        # previously unseen params, create new connection
        kwargs = self.kwargs.copy()
        kwargs.update(host)
        return self.connection_class(**kwargs)

    def set_connections(self, hosts):
        """
        Instantiate all the connections and start handing requests to them in
        turn.

        :arg hosts: same as `__init__`
        """
        connections = [self._create_connection(host) for host in hosts]
        if not connections:
            raise ImproperlyConfigured('No hosts specified.')
        self.connections = connections
        self._cycle = itertools.cycle(connections)

    def get_connection(self):
        return next(self._cycle)

    def _ndjson_line(self, line):
        line = self.serializer.dumps(line)
        if isinstance(line, bytes):
            line = line.decode('utf-8')
        return line

    def _ndjson_body(self, body):
        if isinstance(body, bytes):
            return body if body.endswith(b'\n') else body + b'\n'

        # if not passed in a string, serialize items and join by newline
        if not isinstance(body, str):
            body = '\n'.join(self._ndjson_line(line) for line in body)

        # ndjson body must end with a newline
        if not body.endswith('\n'):
            body += '\n'

        return body

    def perform_request(self, method, url, params=None, body=None, headers=None,
                        ignore=(), request_timeout=None):
        """
        Perform the actual request. Serialize the body, pass everything to the
        next connection and deserialize what comes back.

        :arg method: HTTP method to use
        :arg url: absolute url (without host) to target
        :arg params: dictionary of query parameters, will be handed over to the
            underlying :class:`~esapi.elasticsearch.Connection` class for serialization
        :arg body: body of the request, will be serialized using serializer and
            passed to the connection
        :arg headers: extra http headers for this request
        :arg ignore: status code(s) that shouldn't raise an error
        :arg request_timeout: timeout of this request in seconds
        """
        if body is not None:
            content_type = (headers or {}).get('content-type', '')
            if content_type.startswith('application/x-ndjson'):
                body = self._ndjson_body(body)
            else:
                body = self.serializer.dumps(body)

        if isinstance(ignore, int):
            ignore = (ignore, )

        connection = self.get_connection()
        try:
            status, headers_response, data = connection.perform_request(
                method, url, params, body, headers=headers, ignore=ignore, timeout=request_timeout)
        except TransportError as e:
            # a missing document answers HEAD with a 404
            if method == 'HEAD' and e.status_code == 404:
                return Response(404, {}, False)
            raise

        if method == 'HEAD':
            return Response(status, headers_response, 200 <= status < 300)

        if data:
            data = self.deserializer.loads(data, headers_response.get('content-type'))
        return Response(status, headers_response, data)

    def close(self):
        """ Explicitly closes connections """
        for connection in self.connections:
            connection.close()
