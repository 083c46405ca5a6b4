"""
DevOps Tool Gateway - one catalogue of typed tools for several instances of a DevOps system,
served over JSON-RPC/SSE and REST.
"""
__version__ = "1.0.0"
