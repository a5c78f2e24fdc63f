from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from todo_api.crud.base import CRUDBase
from todo_api.models.todo import Todo, utcnow
from todo_api.schemas.todo import TodoCreate, TodoUpdate

SORTABLE_COLUMNS = {"created_at": Todo.created_at, "title": Todo.title}
SORT_ORDERS = ("asc", "desc")

class CRUDTodo(CRUDBase[Todo, TodoCreate, TodoUpdate]):
    def list_for_user(
        self,
        db: Session,
        *,
        user_id: int,
        limit: int,
        offset: int,
        title: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Todo], int]:
        """Página de todos do usuário + total de linhas que casam com o filtro."""
        where = [Todo.user_id == user_id]
        if title:
            where.append(Todo.title.contains(title, autoescape=True))

        column = SORTABLE_COLUMNS.get(sort_by, Todo.created_at)
        if sort_order == "asc":
            order = (column.asc(), Todo.id.asc())
        else:
            order = (column.desc(), Todo.id.desc())

        stmt = select(Todo).where(*where).order_by(*order).offset(offset).limit(limit)
        rows = list(db.execute(stmt).scalars().all())
        total = db.scalar(select(func.count()).select_from(Todo).where(*where)) or 0
        return rows, int(total)

    def create_many(self, db: Session, items: Sequence[TodoCreate], *, user_id: int) -> List[Todo]:
        """Insere todos em uma única transação: ou entram todos, ou nenhum."""
        created: List[Todo] = []
        try:
            for item in items:
                obj = self.build(item, extra={"user_id": user_id})
                db.add(obj)
                db.flush()  # garante ids na ordem de entrada
                created.append(obj)
            db.commit()
        except Exception:
            db.rollback()
            raise
        for obj in created:
            db.refresh(obj)
        return created

    def update(self, db: Session, db_obj: Todo, obj_in: TodoUpdate | dict) -> Todo:
        data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump()
        # onupdate não dispara quando os valores não mudam
        data["updated_at"] = utcnow()
        return super().update(db, db_obj, data)

todo_crud = CRUDTodo(Todo)
