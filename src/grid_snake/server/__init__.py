"""HTTP and WebSocket front end driving game engines."""
