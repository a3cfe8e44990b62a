from inkwell.auth.permissions import AdminDep, require_admin

__all__ = ["AdminDep", "require_admin"]
