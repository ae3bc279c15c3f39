# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Directory API:
# - test_models.py: Pydantic models and the moderation status machine
# - test_gateway.py: Data Access Gateway against the in-memory client
# - test_moderation_service.py: Submission, approval and aggregate counts
# - test_directory_service.py: Tool and recruiter listings
# - test_api.py: HTTP endpoints, auth and error rendering
# - test_auth.py / test_config.py / test_migrations.py / test_run_migrations_script.py
#
# Run tests with: pytest
# =============================================================================
