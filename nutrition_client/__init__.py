"""
Nutrition tracking client core.

Client-side orchestration for the progress dashboard and the AI
nutrition assistant, following Clean Architecture layering.

Structure:
- domain/: Models, merge rules, ports and typed errors
- application/: Services coordinating triggers against the gateway
- infrastructure/: HTTP adapter for the remote analytics gateway
- tests/: Unit test suite
"""

__version__ = "1.0.0"
