"""Core business logic: scoring, eligibility rules, funding rules, codec and models.

This module is framework-agnostic and has no storage dependency. The stateful
tools and the MCP server both import from here.
"""
