"""
Input validation for textquarry.
"""

from .validation import InputValidator, URLValidationRules, validate_url

__all__ = [
    "InputValidator",
    "URLValidationRules",
    "validate_url",
]
