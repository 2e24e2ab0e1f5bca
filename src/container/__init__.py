"""Avro object-container file reading.

This package parses container headers and writer schemas and decodes
sync-delimited data blocks into Python records.
"""
