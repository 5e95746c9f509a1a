"""Staff authentication: passwords, tokens, roles and rate limiting."""
