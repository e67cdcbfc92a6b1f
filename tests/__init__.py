"""Unit tests for the chat translation service.

Test modules mirror the package layout of the application.
"""
