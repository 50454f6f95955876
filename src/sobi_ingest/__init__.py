"""SOBI bill-change ingest.

Folds incremental SOBI change files from the legislative bill drafting feed
into a JSON document store of bills:

- **Tokenizer**: splits change files into typed, possibly multi-line blocks
- **Appliers**: one per record type, replacing the fields a block carries
- **Resolver / Publisher**: keep a bill's amendment chain consistent

Run an ingest with: ``python scripts/ingest.py <files>``
"""
