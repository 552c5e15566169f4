"""Utility modules for experiment containers."""

from summarizedexperiment.utils.fileio import atomic_write_yaml

__all__ = [
    # Atomic manifest writes
    'atomic_write_yaml',
]
