"""HTTP/WebSocket transport for Space War matches."""
