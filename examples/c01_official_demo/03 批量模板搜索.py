import esapi

# 从环境变量 ESAPI_HOST、ESAPI_PORT 等读取连接参数
es = esapi.new_env()

# 每个搜索由一行头部和一行模板组成
body = [
    {"index": "test-index"},
    {"source": {"query": {"match": {"author": "{{author}}"}}}, "params": {"author": "kimchy"}},
    {"index": "test-index"},
    {"source": {"query": {"match_all": {}}}, "params": {}},
]
res = es.msearch_template(body)
for r in res["responses"]:
    print(r["hits"]["total"])

print(es.ping())
