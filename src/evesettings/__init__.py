"""
eve-settings-manager: list, copy, back up and restore EVE Online character settings.
"""

__version__ = "0.1.0"
