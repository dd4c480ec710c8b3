"""Service layer: farmer calendar and weather."""
