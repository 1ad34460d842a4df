"""Attraction point collections: upsert/delete by coordinate key and the save format."""
