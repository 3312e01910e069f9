class DomainError(Exception):
    """Domain-level error the controller/UI can surface (message box)."""
    pass


__all__ = ["DomainError"]
