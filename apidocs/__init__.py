# =============================================================================
# Versioned API Docs
# =============================================================================
# Per-version OpenAPI documents and a Swagger UI for FastAPI services.
#
# Package structure:
#   apidocs/
#   ├── api/          → configure_documentation / publish_documentation, health
#   ├── models/       → Pydantic V2 document info and UI link models
#   └── services/     → version discovery, descriptor builder, filters,
#                        XML comment files, document generator
# =============================================================================
