"""
MCP DB Schema Server - Main Entry Point
"""

from .server import run

if __name__ == "__main__":
    run()
