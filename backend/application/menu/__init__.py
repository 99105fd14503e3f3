"""Menu application layer - commands, queries, orchestrators and services."""
