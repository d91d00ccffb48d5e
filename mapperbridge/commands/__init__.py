"""Click commands for the mapperbridge CLI."""
