"""Category model definitions."""

from pydantic import Field, model_validator

from backend.models.document import Document, new_id


class Subcategory(Document):
    id: str = Field(default_factory=new_id)
    name: str
    category_id: str = ''


class Category(Document):
    """Top level of the donation taxonomy, with its subcategories embedded."""

    id: str = Field(default_factory=new_id)
    name: str
    icon: str = ''
    subcategories: list[Subcategory] = Field(default_factory=list)

    @model_validator(mode='after')
    def link_subcategories(self) -> 'Category':
        for subcategory in self.subcategories:
            subcategory.category_id = self.id
        return self
