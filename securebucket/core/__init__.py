"""Construction core — normalizer, naming, graph builder, policy composer."""
