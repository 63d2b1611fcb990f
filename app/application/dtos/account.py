"""DTOs for account provisioning."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistrationCommand:
    """Input for the provisioning workflow. The password is only handed to the identity provider."""

    first_name: str
    last_name: str
    birthday: str
    email: str
    password: str
    is_admin: bool = False

    def account_fields(self) -> dict:
        """Fields persisted on the account document (users/{uid})."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "birthday": self.birthday,
            "isAdmin": self.is_admin,
            "email": self.email,
        }


@dataclass(frozen=True)
class RegistrationResult:
    """Successful registration: new identity id and client message."""

    user_id: str
    message: str = "User registered successfully"
