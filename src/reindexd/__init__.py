"""reindexd - network-triggered Sphinx reindex supervisor."""
