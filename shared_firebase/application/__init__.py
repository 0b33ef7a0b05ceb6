"""Application layer: store contract, DTOs and the tree copy/delete services."""
