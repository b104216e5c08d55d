class RegistryError(Exception):
    """Base exception for student registry errors"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class ValidationError(RegistryError):
    """Missing or malformed input"""
    status_code = 400

class ConflictError(RegistryError):
    """Email already belongs to another student"""
    status_code = 400

class NotFoundError(RegistryError):
    """No student with the given id"""
    status_code = 404

class StoreError(RegistryError):
    """The underlying database operation failed"""
    status_code = 500
