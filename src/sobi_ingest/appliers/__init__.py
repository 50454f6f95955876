"""Field appliers, one per SOBI record type.

Every applier has the signature ``apply_x(data, bill, date)`` and either
replaces the fields it owns or raises :class:`~sobi_ingest.blocks.ParseError`.
"""
