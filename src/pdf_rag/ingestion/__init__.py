"""
Ingestion — PDF loading, chunking, embedding, and upserting into the index.

This module is the one-shot ETL path that turns a source PDF into
embedded chunks stored in a namespaced vector index:

    load → split → embed + upsert
"""
