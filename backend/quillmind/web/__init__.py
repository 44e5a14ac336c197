"""HTTP surface and the relational file store."""
