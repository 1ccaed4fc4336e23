"""Core of prstamp: reference parsing, GitHub access, Slack formatting and dispatch."""
