"""Library CLI - Utilities Package

Helpers shared by the CLI and the session layer:
- Form validation (validators.py)
- Output rendering (ui_helpers.py)
"""
