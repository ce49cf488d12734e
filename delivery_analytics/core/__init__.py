"""Core infrastructure: database, configuration, base DAO/service and routing."""
