"""Shared kernel: ids, enums, result type, errors, value types and config."""
