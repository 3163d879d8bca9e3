"""Discover package test suites in a vendor tree and register their namespaces."""
