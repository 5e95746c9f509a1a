"""ConvoHub backend: multi-tenant customer conversation platform."""
