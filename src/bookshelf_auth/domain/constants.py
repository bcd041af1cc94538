from enum import Enum


ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"

# Every principal carries this role, whatever else it was assigned.
DEFAULT_ROLE = ROLE_USER

ASSIGNABLE_ROLES = (ROLE_USER, ROLE_ADMIN)

DEFAULT_TOKEN_TTL_SECONDS = 3600
TOKEN_ALGORITHM = "HS256"


class Message(str, Enum):
    """User-facing messages carried in `{"error": ...}` bodies."""

    MALFORMED_HEADER = "Token manquant ou invalide"
    TOKEN_EXPIRED = "Token expiré. Veuillez vous reconnecter."
    INVALID_TOKEN_PREFIX = "Token JWT invalide"
    PRINCIPAL_NOT_FOUND = "Utilisateur non trouvé"
    WRONG_PASSWORD = "Mot de passe incorrect"
    MISSING_CREDENTIALS = "UUID et mot de passe sont requis"
    DUPLICATE_UUID = "Cet UUID existe déjà"
    ACCESS_DENIED = "Accès refusé"
    AUTHENTICATION_REQUIRED = "Authentication required"
    LOGIN_SUCCEEDED = "Connexion réussie"
    PRINCIPAL_CREATED = "Utilisateur créé avec succès"
    INVALID_REQUEST = "Requête invalide"

    def __str__(self) -> str:
        return self.value
