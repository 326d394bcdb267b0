"""Catalog API: product catalog service with paginated queries and semantic search."""
