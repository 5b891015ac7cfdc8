"""Record expansion modules."""

from agromet.clean.expand_records import expand, expand_measurements

__all__ = ["expand", "expand_measurements"]
