"""
Configuration management module.
"""
from .settings import Settings, get_settings
from .elasticsearch import create_client, get_client, close_client
from .dependencies import get_document_store

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Elasticsearch
    "create_client",
    "get_client",
    "close_client",
    # Dependencies
    "get_document_store",
]
