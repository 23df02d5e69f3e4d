"""Shared fixtures for license-resolver tests."""

import pytest
from click.testing import CliRunner

from license_resolver.models.config import ResolverOptions


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def options() -> ResolverOptions:
    """Default run options."""
    return ResolverOptions()


@pytest.fixture
def mit_license_text() -> str:
    """MIT license text with LF line endings."""
    return """MIT License

Copyright (c) 2024 Example

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction.
"""
