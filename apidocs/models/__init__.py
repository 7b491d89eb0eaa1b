# =============================================================================
# Models Package — Pydantic V2 Schemas
# =============================================================================
# Document info and UI link models shared by the services and the API layer.
# =============================================================================
