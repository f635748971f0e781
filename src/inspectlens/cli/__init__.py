"""Command-line interface for InspectLens."""
