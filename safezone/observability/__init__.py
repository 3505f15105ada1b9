"""
Observability for safezone: loguru logging, Prometheus metrics
and the FastAPI HTTP surface.
"""
