"""Utility modules for common operations."""

from protofilter.utils.cli_output import json_response

__all__ = ["json_response"]
