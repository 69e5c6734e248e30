from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from frontdesk.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class Repository(Generic[ModelType]):
    """
    Query wrapper over a caller-owned session.

    Repositories add and flush; committing is the calling service's job so one
    operation stays one unit of work.
    """

    model: Type[ModelType]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id) -> Optional[ModelType]:
        return self.db.query(self.model).filter(self.model.id == entity_id).first()

    def get_for_update(self, entity_id) -> Optional[ModelType]:
        return (
            self.db.query(self.model)
            .filter(self.model.id == entity_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def add(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self.db.flush()
        return entity
