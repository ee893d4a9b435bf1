"""
Services package initialization.
Centralizes I/O-backed collaborators of the engine.
"""

from ekatra.services.mime_probe import HttpMimeProbe

__all__ = [
    'HttpMimeProbe'
]
