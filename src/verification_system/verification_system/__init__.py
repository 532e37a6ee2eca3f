"""Workforce Verification package.

This package is organized by feature modules (users, sections, verification,
review, wizard) with a thin Flask controller layer and service/repository
layers behind it.
"""
