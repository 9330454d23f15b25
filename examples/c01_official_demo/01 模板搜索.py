from datetime import datetime
from esapi.elasticsearch import Elasticsearch

es = Elasticsearch(
    hosts=["http://127.0.0.1:9200"],
    http_auth=('elastic', 'changeme'),
)

# 新增
index = "test-index"
doc_type = "tweet"
doc = {
    'author': 'kimchy',
    'text': 'Elasticsearch: cool. bonsai cool.',
    'timestamp': datetime.now(),
}
es.index(index, doc_type, doc, id=1, refresh='true')

# 模板搜索：不支持的参数 bogus 会被忽略
res = es.search_template(
    index=[index],
    routing="r1",
    bogus="x",
    body={
        "source": {"query": {"match": {"author": "{{author}}"}}},
        "params": {"author": "kimchy"},
    },
)
print(res["hits"]["hits"])

# 删除文档
es.delete(index, doc_type, 1, ignore=404)
