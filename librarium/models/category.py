from sqlalchemy import Column, ForeignKey, Integer, String, Text

from librarium.dependencies.database import Base


class Category(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(Text)
    parent_category_id = Column(
        Integer,
        ForeignKey("categories.category_id", ondelete="SET NULL"),
        nullable=True,
    )

    # Спільний інтерфейс для перевірки циклів в ієрархії
    parent_column = "parent_category_id"
