"""HTTP and WebSocket surface of the flight aggregator."""
