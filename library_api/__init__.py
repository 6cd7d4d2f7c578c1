"""Library API — authors and books behind media-type and version negotiation."""
