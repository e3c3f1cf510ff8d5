"""Output filters applied while rendering."""
