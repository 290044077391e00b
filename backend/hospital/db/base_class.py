from sqlalchemy.orm import declarative_base

Base = declarative_base()


def mapped_class(table):
    """Returns the declarative class mapped to ``table``, or None for plain tables."""
    for mapper in Base.registry.mappers:
        if mapper.local_table is table:
            return mapper.class_
    return None
