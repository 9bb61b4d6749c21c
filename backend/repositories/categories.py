import logging

from backend.models.category import Category, Subcategory
from backend.repositories.base import EntityRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ('Roupas', '👕', ['Roupas Infantis', 'Roupas Adultas', 'Roupas de Frio', 'Calçados']),
    ('Alimentos', '🍞', ['Alimentos Não Perecíveis', 'Cestas Básicas', 'Produtos de Higiene']),
    ('Móveis', '🪑', ['Móveis Pequenos', 'Móveis Grandes', 'Eletrodomésticos']),
    ('Livros e Material Escolar', '📚', ['Livros Didáticos', 'Material Escolar', 'Brinquedos Educativos']),
    ('Brinquedos', '🧸', ['Brinquedos Infantis', 'Jogos', 'Brinquedos Educativos']),
]


def build_default_categories() -> list[Category]:
    return [
        Category(
            name=name,
            icon=icon,
            subcategories=[Subcategory(name=subcategory) for subcategory in subcategories],
        )
        for name, icon, subcategories in DEFAULT_CATEGORIES
    ]


class CategoryRepository(EntityRepository[Category]):
    collection = 'categories'
    model = Category

    def get_stored(self) -> list[Category]:
        return super().get_all()

    def get_all(self) -> list[Category]:
        """Seeds the default taxonomy whenever the category store is empty."""
        categories = self.get_stored()
        if categories:
            return categories
        return self.seed_defaults()

    def seed_defaults(self) -> list[Category]:
        defaults = build_default_categories()
        for category in defaults:
            self.save(category)
        logger.info('Seeded %d default categories', len(defaults))
        return defaults
