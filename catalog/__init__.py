"""Catalog item service: drafts, images, embeddings and the publish lifecycle."""
