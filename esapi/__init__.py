from .elasticsearch import Elasticsearch
from .client import new, new_env
