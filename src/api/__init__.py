"""HTTP API for publishing newsletter issues.

Run with: uvicorn src.api.app:app
"""
