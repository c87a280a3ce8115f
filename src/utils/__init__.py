"""
Utility helpers for the audience simulation
"""

from .errors import ConfigError, MissingCollaboratorError

__all__ = [
    'ConfigError',
    'MissingCollaboratorError',
]
