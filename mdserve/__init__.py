"""
mdserve - serve a folder of Markdown files as sanitized HTML.
"""

from mdserve.version_info import __version__

__all__ = ["__version__"]
