"""Utility modules for tagval.

This package contains helper modules for reading and decoding JSON input
into records, and for resolving record types named on the command line.
"""
