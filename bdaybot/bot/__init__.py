"""Discord transport for bdaybot."""
