"""
                QR Menu Backend

Digital restaurant menu service: a public menu API and a password
protected admin API, persisted in a document store with a bundled
demo dataset as fallback.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
