from .new import new
from .new_env import new_env
