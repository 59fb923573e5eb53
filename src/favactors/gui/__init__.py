"""Qt user interface for favactors."""
