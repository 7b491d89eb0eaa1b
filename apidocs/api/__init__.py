# =============================================================================
# API Package — FastAPI Routes & Documentation Wiring
# =============================================================================
#   - docs.py: configure_documentation / publish_documentation
#   - health.py: version-neutral health check
# =============================================================================
