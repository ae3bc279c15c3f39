# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a gateway backed by an in-memory Supabase stand-in
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app modules that read settings

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ADMIN_EMAILS", "mod@directory.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from app.config import Settings, get_settings
from core.services import DirectoryService, ModerationService
from lib.supabase_client import SupabaseGateway
from tests.fake_supabase import FakeSupabaseClient


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def gateway(settings, fake_client) -> SupabaseGateway:
    return SupabaseGateway(settings, client=fake_client)


@pytest.fixture
def moderation(gateway, settings) -> ModerationService:
    return ModerationService(gateway, settings)


@pytest.fixture
def directory(gateway) -> DirectoryService:
    return DirectoryService(gateway)


@pytest.fixture
def tool(fake_client) -> dict:
    """A visible tool with zeroed aggregates."""
    return fake_client.seed("tools", {
        "id": "tool-1",
        "name": "Acme Talent",
        "slug": "acme-talent",
        "tagline": "Engineering recruiters",
        "featured": False,
        "hidden": False,
        "upvotes": 0,
        "downvotes": 0,
        "votes": 0,
        "comment_count": 0,
    })


@pytest.fixture
def comment_payload(tool) -> dict:
    return {
        "tool_id": tool["id"],
        "user_email": "jane@acme.com",
        "user_name": "Jane Doe",
        "user_company": "Acme",
        "user_title": "Engineering Manager",
        "content": "  Placed me in two weeks.  ",
    }


@pytest.fixture
def vote_payload(tool) -> dict:
    return {
        "tool_id": tool["id"],
        "user_email": "sam@example.com",
        "user_name": "Sam",
        "vote_type": "up",
    }
