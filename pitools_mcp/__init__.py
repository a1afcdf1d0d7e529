"""PiTools MCP Server Package.

This package provides a Model Context Protocol (MCP) server exposing a small
collection of tools backed by third-party APIs.

Features:
- DuckDuckGo web search
- LinkedIn post creation (text, article, image, video and poll posts)
- Instagram image publishing

Usage:
    Run the server: pitools-mcp
    Default transport is stdio; set MCP_TRANSPORT=http to serve over HTTP.
"""
import logging

# Set up a null handler to avoid "No handler found" warnings
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
