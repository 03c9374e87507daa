"""Core identity, token and access-control modules."""
