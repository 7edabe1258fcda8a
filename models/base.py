import importlib
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base, object_session
from sqlalchemy import event, select
from core.id_generator import IdAllocationError, generate_random_id

# Shared Base for all models
Base = declarative_base()

ID_ATTEMPTS = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _pending_ids(target) -> set:
    session = object_session(target)
    if session is None:
        return set()
    return {
        obj.id
        for obj in session.new
        if obj is not target and type(obj) is type(target) and getattr(obj, "id", None) is not None
    }


@event.listens_for(Base, "before_insert", propagate=True)
def assign_random_id(mapper, connection, target):
    if getattr(target, "id", None) is not None:
        return
    table = mapper.local_table
    # ids handed out earlier in the same flush are not in the table yet
    pending = _pending_ids(target)
    for _ in range(ID_ATTEMPTS):
        candidate = generate_random_id(table.name)
        if candidate in pending:
            continue
        taken = connection.execute(select(table.c.id).where(table.c.id == candidate)).first()
        if taken is None:
            target.id = candidate
            return
    raise IdAllocationError(f"No free id for {table.name} after {ID_ATTEMPTS} attempts")


MODEL_MODULES = (
    "models.user",
    "models.post",
    "models.comment",
    "models.follow",
    "models.like",
    "models.save",
    "models.message",
    "models.notification",
    "models.contact_request",
    "models.push_subscription",
    "models.upload",
)


def load_models() -> None:
    """Imports every model module so all tables are registered on Base.metadata."""
    for module in MODEL_MODULES:
        importlib.import_module(module)
