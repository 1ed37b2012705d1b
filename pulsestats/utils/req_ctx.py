from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

# Fields of the query being served; read by the JSON log formatter.
QUERY_CTX = ContextVar("query_ctx", default=None)


def get_req_ctx(key, default=None):
    ctx = QUERY_CTX.get()
    return ctx[key] if ctx and key in ctx else default


@contextmanager
def set_req_ctx(data):
    # Copy so that concurrent queries never share the same dict.
    token = QUERY_CTX.set(dict(data))
    try:
        yield
    finally:
        QUERY_CTX.reset(token)


def query_ctx(operation: str, sample_type: str):
    """Context for one store query, tagged with a fresh short query id"""
    return set_req_ctx({
        "query_id"      : uuid4().hex[:8],
        "operation"     : operation,
        "sample_type"   : sample_type,
    })
