"""CLI command modules; each registers itself on the dockterm group."""
