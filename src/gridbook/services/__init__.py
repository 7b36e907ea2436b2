"""Service layer: calculations and workflows behind the HTTP routes."""
