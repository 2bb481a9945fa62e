"""
Core modules for journal and ledger rendering.

This package contains:
- accounts: Account name resolution and the equivalence CSV loader
- config: Application configuration and settings
- document: Markdown frontmatter and code block discovery
- exceptions: Custom exception classes
- exporters: HTML and Excel output
- logger: Logging configuration
- numbers: Locale-tolerant amount parsing and formatting
- parsing: Journal and ledger block parser
- rendering: Abstract table projections
- schema: Pydantic models for entries and tables
"""
