# --- Custom Exceptions ---

class FamilyTreeError(Exception):
    pass

class ValidationError(FamilyTreeError):
    pass

class NotFoundError(FamilyTreeError):
    pass

class PersistenceError(FamilyTreeError):
    pass

class AuthenticationError(FamilyTreeError):
    pass

class ProjectNotFoundError(FamilyTreeError):
    pass
