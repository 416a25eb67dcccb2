"""Core domain: entries, formats, property readers and converters."""
