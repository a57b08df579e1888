"""Core components for tagval.

This package contains the fundamental building blocks of the validation
engine, including the base class for all predicates, the rule tokenizer,
record introspection, the configuration manager, and the traversal engine.
"""
