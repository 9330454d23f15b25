from esapi.elasticsearch import Elasticsearch


def new(
        host="127.0.0.1",
        port=9200,
        username="elastic",
        password="",
        **kwargs
):
    """
    新建ES6客户端连接对象

    没有用户名时不使用认证，其余参数原样传给 Elasticsearch
    """
    if username:
        kwargs["http_auth"] = (username, password)
    return Elasticsearch(
        hosts=[f"http://{host}:{port}"],
        **kwargs
    )
