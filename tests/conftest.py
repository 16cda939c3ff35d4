"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field declared by the modules under test.
    """
    import spheretrace

    spheretrace.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_device_scene():
    """Clear device sphere storage and the material table around each test."""
    # Import here so Taichi is initialized before fields are declared
    from spheretrace.materials.registry import clear_materials
    from spheretrace.scene.intersection import clear_scene

    clear_scene()
    clear_materials()
    yield
    clear_scene()
    clear_materials()
