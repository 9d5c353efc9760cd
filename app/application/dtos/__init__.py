"""Application DTOs: plain frozen dataclasses passed between layers."""
