"""Core building blocks: exceptions, logging configuration and schemas."""
