"""Utility modules for the validity engine.

This package contains helpers that feed the engine from the outside world,
such as reading forms and fields out of HTML markup.
"""
