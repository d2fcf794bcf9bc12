"""Animal Voice Agent HTTP backend."""
