"""Pure domain layer: value enums, DTOs, identity, validation, workflows.

Nothing in this package performs I/O or imports from db/, services/ or
selectors/.
"""
