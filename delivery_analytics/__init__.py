"""Food delivery analytics: relational store plus the business reporting layer."""
