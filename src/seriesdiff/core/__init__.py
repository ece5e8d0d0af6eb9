"""Core models, configuration, loaders and errors for SeriesDiff."""
