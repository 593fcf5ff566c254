"""Infrastructure — database sessions, structured logging, Slack Web API client."""
