import os
from .new import new


def new_env():
    """
    新建ES6客户端连接对象
    """
    # 从环境变量读取参数
    host = os.environ.get("ESAPI_HOST", "127.0.0.1")
    port = os.environ.get("ESAPI_PORT", "9200")
    username = os.environ.get("ESAPI_USERNAME", "elastic")
    password = os.environ.get("ESAPI_PASSWORD", "")
    # 为 1 时拒绝接口不支持的查询参数
    validate_params = os.environ.get("ESAPI_VALIDATE_PARAMS", "0") == "1"

    return new(host, port, username, password, validate_params=validate_params)
