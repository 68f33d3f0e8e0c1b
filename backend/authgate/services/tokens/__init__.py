"""Token primitives: lifetimes, expiry predicates, settings and the issuer."""
