"""Core building blocks of the file service client."""
