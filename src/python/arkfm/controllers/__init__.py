"""
Controllers package - coordinate between a view and the services.
"""

from .main_controller import MainController

__all__ = [
    'MainController'
]
