"""
Root pytest configuration for the Django project.

pytest-django loads config.settings (see pyproject.toml). This module
provides project-wide hooks; app-specific fixtures are defined in each
app's tests/conftest.py.
"""

import pytest


def pytest_configure(config):
    """Adjust settings that only matter under test."""
    from django.conf import settings

    # Fast password hasher for admin user fixtures
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full client journeys over HTTP)
    - test_views.py, test_services.py, test_concurrency.py, etc. → integration
    - test_models.py, test_validators.py, test_cursors.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    # Filename patterns for each category
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_store.py",
        "test_log.py",
        "test_concurrency.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_validators.py",
        "test_cursors.py",
        "test_constants.py",
        "test_exceptions.py",
        "test_helpers.py",
        "test_service_result.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        # Check patterns in priority order
        if any(pattern == filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern == filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern == filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
