"""reindexd CLI."""
