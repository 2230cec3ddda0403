"""validity: declarative form validation.

This package checks form fields against the validation rules declared on
them, reports the failures through a pluggable error-state adapter, and maps
server-side error codes back onto the fields that asked for them.
"""

__version__ = "0.1.0"
__author__ = "Andrew Finch"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
