VERSION = (6, 8, 0)
__version__ = VERSION
__versionstr__ = '.'.join(map(str, VERSION))

from .client import Elasticsearch
from .client.actions import Action, ACTIONS, build_request
from .client.registry import ParamsRegistry, PARAMS_REGISTRY
from .client.utils import build_path, extract_params, validate_params
from .transport import Transport, Response
from .connection import Connection, Urllib3HttpConnection
from .serializer import JSONSerializer
from .exceptions import *
