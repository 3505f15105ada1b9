"""
Common utilities for safezone (geo calculations, retry).
"""
