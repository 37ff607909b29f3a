"""Application layer: DTOs, ports and cached entity services."""
