"""Style catalog ingestion (master JSON → Entity)."""
