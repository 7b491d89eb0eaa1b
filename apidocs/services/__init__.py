# =============================================================================
# Services Package — Documentation Building Blocks
# =============================================================================
#   - versioning.py: API version discovery from route paths
#   - descriptors.py: per-version document info
#   - filters.py: operation and schema filters
#   - comments.py: XML comment file discovery and loading
#   - generator.py: DocumentationOptions and the per-version generator
# =============================================================================
