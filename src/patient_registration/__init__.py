"""Patient Registration Toolkit.

Validation engine and step workflow for hospital patient registration.
"""

__version__ = "0.1.0"
