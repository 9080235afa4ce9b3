"""Database schema, connection handling and seeding."""
