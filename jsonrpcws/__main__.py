"""
Entry point for running jsonrpcws as a module: python -m jsonrpcws
"""

from jsonrpcws.cli.commands import app

if __name__ == "__main__":
    app()
