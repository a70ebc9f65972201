"""NetworkX view of the direct parent-link graph."""
