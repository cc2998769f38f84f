"""Template loading and signature rendering."""
