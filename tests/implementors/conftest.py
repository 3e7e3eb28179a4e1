"""Shared fixtures for the implementors test suite."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from DocsIndex.Implementors.registry import HandoffRegistry, reset_registry
from DocsIndex.Implementors.settings import reset_settings
from DocsIndex.Implementors.types import ImplementorDescriptor, validate_groups

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def error_compat_script() -> Path:
    """Path to the rustdoc-generated ``snafu::ErrorCompat`` implementors script."""
    return DATA_DIR / "implementors" / "snafu" / "trait.ErrorCompat.js"


@pytest.fixture
def registry() -> HandoffRegistry:
    return HandoffRegistry()


@pytest.fixture
def alpha_beta_groups():
    """Two-group mapping: ``alpha`` with one implementor, ``beta`` with two."""
    return validate_groups(
        {
            "alpha": [
                ImplementorDescriptor(
                    text='impl T for <a class="struct" href="alpha/struct.A.html">A</a>',
                    types=("alpha::A",),
                ),
            ],
            "beta": [
                ImplementorDescriptor(
                    text='impl T for <a class="enum" href="beta/enum.B.html">B</a>',
                    types=("beta::B",),
                ),
                ImplementorDescriptor(
                    text='impl T for <a class="struct" href="beta/struct.C.html">C</a>',
                    synthetic=True,
                    types=("beta::C",),
                ),
            ],
        }
    )


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Reset the global registry, cached settings, and managed log handlers."""
    reset_registry()
    reset_settings()
    yield
    reset_registry()
    reset_settings()
    logger = logging.getLogger("DocsIndex")
    for handler in list(logger.handlers):
        if getattr(handler, "_docsindex_managed", False):
            logger.removeHandler(handler)
            handler.close()
