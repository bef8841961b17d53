from sqlalchemy import Enum as SAEnum


def enum_column(enum_cls, name: str) -> SAEnum:
    """Enum stored as its display value and guarded by a CHECK constraint."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        values_callable=lambda members: [member.value for member in members],
    )
