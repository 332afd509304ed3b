"""Test configuration and fixtures for the bookshelf service."""

from tests.fixtures import *  # noqa: F401,F403
