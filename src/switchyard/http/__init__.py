"""Request boundary between an HTTP server and the router."""
