"""
jsonrpcws - JSON-RPC dispatch over websockets
"""

__version__ = "0.1.0"
__logo__ = "🔌"
