"""Case-record intake: parse pasted fichas, assemble payloads, store them."""
