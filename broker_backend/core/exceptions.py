class ClaimUpdateError(Exception):
    """Raised when the admin custom claim of a user could not be read or written."""

    def __init__(self, uid: str, is_admin: bool):
        super().__init__(f"Failed to update admin claim for uid={uid} (is_admin={is_admin})")
        self.uid = uid
        self.is_admin = is_admin
