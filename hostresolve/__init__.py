"""Resolve the hostnames listed in ``*.hosts`` files and write the addresses back out."""

__version__ = "0.1.0"
