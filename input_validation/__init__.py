"""
Input Validation and Sanitization App

Validates identifiers and comment submissions, and strips markup from free
text before it is stored.
"""
