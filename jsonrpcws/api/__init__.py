"""HTTP/WebSocket surface for jsonrpcws."""
