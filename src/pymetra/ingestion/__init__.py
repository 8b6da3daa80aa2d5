"""Ingestion layer.

This package contains the helpers that turn raw Metra API payloads into
inputs the typed models can validate.
"""

__all__: list[str] = []
