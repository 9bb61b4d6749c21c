from backend.models.user import User
from backend.repositories.base import EntityRepository


class UserRepository(EntityRepository[User]):
    collection = 'users'
    model = User

    def find_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        return next((user for user in self.get_all() if user.email == normalized), None)

    def find_by_cpf(self, cpf: str) -> User | None:
        return next((user for user in self.get_all() if user.cpf and user.cpf == cpf), None)

    def find_by_cnpj(self, cnpj: str) -> User | None:
        return next((user for user in self.get_all() if user.cnpj and user.cnpj == cnpj), None)
