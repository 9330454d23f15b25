import json
import logging
import time
from urllib.parse import urlencode

import urllib3
from urllib3.exceptions import ReadTimeoutError, SSLError as UrllibSSLError

from .client.utils import _escape
from .exceptions import (TransportError, ImproperlyConfigured, ConnectionError,
                         ConnectionTimeout, SSLError, HTTP_EXCEPTIONS)

logger = logging.getLogger('esapi')

# create the esapi.trace logger, but only set propagate to False if the
# logger hasn't already been configured
_tracer_already_configured = 'esapi.trace' in logging.Logger.manager.loggerDict
tracer = logging.getLogger('esapi.trace')
if not _tracer_already_configured:
    tracer.propagate = False


class Connection(object):
    """
    Class responsible for maintaining a connection to an Elasticsearch node. It
    holds persistent connection pool to it and its main interface
    (``perform_request``) is thread-safe.

    :arg host: hostname of the node (default: localhost)
    :arg port: port to use (integer, default: 9200)
    :arg use_ssl: use https for the connection if ``True``
    :arg url_prefix: optional url prefix for elasticsearch
    :arg timeout: default timeout in seconds (float, default: 10)
    """
    transport_schema = 'http'

    def __init__(self, host='localhost', port=9200, use_ssl=False, url_prefix='',
                 timeout=10, **kwargs):
        scheme = 'https' if use_ssl else self.transport_schema
        if ':' in host:
            # ipv6
            host = '[%s]' % host.strip('[]')
        self.host = '%s://%s:%s' % (scheme, host, port)
        if url_prefix:
            url_prefix = '/' + url_prefix.strip('/')
        self.url_prefix = url_prefix
        self.timeout = timeout

    def __repr__(self):
        return '<%s: %s>' % (self.__class__.__name__, self.host)

    def _encode_params(self, params):
        return urlencode([(k, _escape(v)) for k, v in params.items()])

    def _pretty_json(self, data):
        # pretty JSON in tracer curl logs
        try:
            return json.dumps(json.loads(data), sort_keys=True, indent=2,
                              separators=(',', ': ')).replace("'", r'\u0027')
        except (ValueError, TypeError):
            # non-json data or a bulk request
            return data

    def _log_trace(self, method, path, body, status_code, response, duration):
        if not tracer.isEnabledFor(logging.INFO) or not tracer.handlers:
            return

        # include pretty in trace curls
        path = path.replace('?', '?pretty&', 1) if '?' in path else path + '?pretty'
        if self.url_prefix:
            path = path.replace(self.url_prefix, '', 1)
        tracer.info("curl %s-X%s 'http://localhost:9200%s' -d '%s'",
                    "-H 'Content-Type: application/json' " if body else '',
                    method, path, self._pretty_json(body) if body else '')

        if tracer.isEnabledFor(logging.DEBUG):
            tracer.debug('#[%s] (%.3fs)\n#%s', status_code, duration,
                         self._pretty_json(response).replace('\n', '\n#') if response else '')

    def log_request_success(self, method, full_url, path, body, status_code, response, duration):
        """ Log a successful API call.  """
        if body:
            try:
                body = body.decode('utf-8', 'ignore')
            except AttributeError:
                pass

        logger.info('%s %s [status:%s request:%.3fs]', method, full_url, status_code, duration)
        logger.debug('> %s', body)
        logger.debug('< %s', response)

        self._log_trace(method, path, body, status_code, response, duration)

    def log_request_fail(self, method, full_url, path, body, duration, status_code=None,
                         response=None, exception=None):
        """ Log an unsuccessful API call.  """
        # do not log 404s on HEAD requests
        if method == 'HEAD' and status_code == 404:
            return
        logger.warning('%s %s [status:%s request:%.3fs]', method, full_url,
                       status_code or 'N/A', duration, exc_info=exception is not None)

        if body:
            try:
                body = body.decode('utf-8', 'ignore')
            except AttributeError:
                pass

        logger.debug('> %s', body)

        self._log_trace(method, path, body, status_code, response, duration)

        if response is not None:
            logger.debug('< %s', response)

    def _raise_error(self, status_code, raw_data):
        """ Locate appropriate exception and raise it. """
        error_message = raw_data
        additional_info = None
        try:
            if raw_data:
                additional_info = json.loads(raw_data)
                error_message = additional_info.get('error', error_message)
                if isinstance(error_message, dict) and 'type' in error_message:
                    error_message = error_message['type']
        except (ValueError, TypeError, AttributeError) as err:
            logger.warning('Undecodable raw error response from server: %s', err)

        raise HTTP_EXCEPTIONS.get(status_code, TransportError)(status_code, error_message, additional_info)


class Urllib3HttpConnection(Connection):
    """
    Default connection class using the `urllib3` library and the http protocol.

    :arg host: hostname of the node (default: localhost)
    :arg port: port to use (integer, default: 9200)
    :arg http_auth: optional http auth information as either ':' separated
        string or a tuple
    :arg use_ssl: use ssl for the connection if `True`
    :arg verify_certs: whether to verify SSL certificates
    :arg ca_certs: optional path to CA bundle
    :arg maxsize: the number of connections which will be kept open to this
        host
    :arg headers: any custom http headers to be add to requests
    """

    def __init__(self, host='localhost', port=9200, http_auth=None, use_ssl=False,
                 verify_certs=True, ca_certs=None, maxsize=10, headers=None, **kwargs):
        super(Urllib3HttpConnection, self).__init__(host=host, port=port, use_ssl=use_ssl, **kwargs)

        self.headers = urllib3.make_headers(keep_alive=True)
        if http_auth is not None:
            if isinstance(http_auth, (tuple, list)):
                http_auth = ':'.join(http_auth)
            elif not isinstance(http_auth, str):
                raise ImproperlyConfigured('HTTP Auth Credentials should be str or tuple, not %s'
                                           % type(http_auth))
            self.headers.update(urllib3.make_headers(basic_auth=http_auth))
        for k, v in (headers or {}).items():
            self.headers[k.lower()] = v
        self.headers.setdefault('content-type', 'application/json')

        pool_class = urllib3.HTTPConnectionPool
        kw = {}
        if use_ssl:
            pool_class = urllib3.HTTPSConnectionPool
            if verify_certs:
                kw.update(cert_reqs='CERT_REQUIRED', ca_certs=ca_certs)
            else:
                kw['cert_reqs'] = 'CERT_NONE'
                logger.warning('Connecting to %s using SSL with verify_certs=False is insecure.',
                               self.host)

        self.pool = pool_class(host, port=port, timeout=self.timeout, maxsize=maxsize, **kw)

    def perform_request(self, method, url, params=None, body=None, timeout=None, ignore=(),
                        headers=None):
        url = self.url_prefix + url
        if params:
            url = '%s?%s' % (url, self._encode_params(params))
        full_url = self.host + url

        start = time.time()
        try:
            kw = {}
            if timeout:
                kw['timeout'] = timeout

            # the body has to be bytes
            if isinstance(body, str):
                body = body.encode('utf-8')

            request_headers = self.headers.copy()
            for k, v in (headers or {}).items():
                request_headers[k.lower()] = v

            response = self.pool.urlopen(method, url, body, retries=urllib3.Retry(False),
                                         headers=request_headers, **kw)
            duration = time.time() - start
            raw_data = response.data.decode('utf-8')
        except Exception as e:
            self.log_request_fail(method, full_url, url, body, time.time() - start, exception=e)
            if isinstance(e, UrllibSSLError):
                raise SSLError('N/A', str(e), e)
            if isinstance(e, ReadTimeoutError):
                raise ConnectionTimeout('TIMEOUT', str(e), e)
            raise ConnectionError('N/A', str(e), e)

        # raise errors based on http status codes, let the client handle those if needed
        if not (200 <= response.status < 300) and response.status not in ignore:
            self.log_request_fail(method, full_url, url, body, duration, response.status, raw_data)
            self._raise_error(response.status, raw_data)

        self.log_request_success(method, full_url, url, body, response.status, raw_data, duration)

        return response.status, response.headers, raw_data

    def close(self):
        """ Explicitly closes connection """
        self.pool.close()
