"""HTTP API for the tool and resource catalog."""
