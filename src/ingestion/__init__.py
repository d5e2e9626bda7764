"""Site ingestion: route discovery and markdown import."""
