"""Storage infrastructure: engine/session helpers and SQLModel repositories."""
