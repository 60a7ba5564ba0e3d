"""CLI for jsonrpcws."""
