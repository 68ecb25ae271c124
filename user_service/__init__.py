"""User identity service: user persistence and cookie-based request identity."""
