from esapi.elasticsearch import Elasticsearch, InvalidParameterError

es = Elasticsearch(
    hosts=["http://127.0.0.1:9200"],
    http_auth=('elastic', 'changeme'),
    validate_params=True,
)

# 严格模式下，接口不支持的查询参数直接报错，不会发出请求
try:
    es.search_template(index="test-index", bogus="x", body={"id": "my-template"})
except InvalidParameterError as e:
    print(e)
