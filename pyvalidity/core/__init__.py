"""Core components for the validity engine.

This package contains the fundamental building blocks: the base class for
all rules, the rule registry, the field and form model, the error-state
adapter contract, the configuration manager, and the validation
orchestrator.
"""
