"""
Client Dashboard Backend Package.

FastAPI service layer for the client dashboard. Ingests the client spreadsheet
(CSV export), derives summary metrics and chart series, and relays chat
messages to the assistant webhook, which may push data updates back.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, shared HTTP client, errors and dependencies
    - models: Pydantic schemas and enums
    - services: Ingestion, aggregation and session services
"""

__version__ = "1.0.0"
