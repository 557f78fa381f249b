"""Core domain: values, statistics, buckets, registry and scheduling."""
