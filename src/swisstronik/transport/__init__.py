from swisstronik.transport.http import HttpTransport, Transport

__all__ = ["HttpTransport", "Transport"]
