"""Pytest configuration and shared fixtures."""

pytest_plugins = [
    "tests.fixtures.emails",
    "tests.fixtures.mailstore",
]
