"""Hardware layer - LED frame sinks"""
