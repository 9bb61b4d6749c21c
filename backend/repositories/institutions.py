from backend.models.institution import Institution
from backend.repositories.users import UserRepository


class InstitutionRepository(UserRepository):
    """Institutions share the user identity fields, so the email/CNPJ lookups apply."""

    collection = 'institutions'
    model = Institution
