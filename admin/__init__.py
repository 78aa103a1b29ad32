"""Admin command-line tools for the Business Directory."""
