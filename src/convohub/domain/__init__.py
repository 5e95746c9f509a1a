"""Domain logic independent of web and storage frameworks."""
