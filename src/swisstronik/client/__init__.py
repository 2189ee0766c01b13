from swisstronik.client.client import (
    NODE_PUBLIC_KEY_METHOD,
    SwisstronikClient,
    create_swisstronik_client,
)
from swisstronik.client.interceptor import (
    Dispatch,
    EncryptionInterceptor,
    RequestInterceptor,
    RpcCall,
)

__all__ = [
    "SwisstronikClient",
    "create_swisstronik_client",
    "NODE_PUBLIC_KEY_METHOD",
    "RequestInterceptor",
    "EncryptionInterceptor",
    "RpcCall",
    "Dispatch",
]
