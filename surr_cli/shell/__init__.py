"""Interactive and scriptable client for a remote SurrealDB instance."""
