"""Infrastructure layer - external systems integration.

Contains adapters for:
- api/: HTTP client for the remote discovery service
- animation/: asyncio-driven card animator
- terminal/: line-oriented front-end used by the console script
"""
