"""Template ingestion.

This module walks the remote template table page by page and hands raw
records to the transforms layer for canonical mapping.
"""
