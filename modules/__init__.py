"""
Application Modules.

- notes/: Versioned note store, document store adapters, CLI
"""
