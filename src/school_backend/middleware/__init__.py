from .request_debugger import RequestDebuggerMiddleware

__all__ = ["RequestDebuggerMiddleware"]
