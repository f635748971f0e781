"""Core query, extraction and status logic for InspectLens."""
