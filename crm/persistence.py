# persistence.py
from contextlib import contextmanager

from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from crm import db, logger
from .errors import BackendError, InvalidInputError


@contextmanager
def backend_call(operation):
    """
    Run a database request. Any SQLAlchemy failure rolls the session back,
    is logged and surfaces as ``BackendError``; nothing is retried.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Backend error during {operation}: {str(e)}")
        raise BackendError(f"{operation} failed") from e


class TableAccessor:
    """
    Typed access to one table. Every method returns plain row dicts keyed
    by column name (or ``None``), never ORM instances, so callers cannot
    reach the session through a result.
    """

    def __init__(self, model):
        self.model = model
        self.name = model.__tablename__
        self._columns = set(model.__table__.columns.keys())

    def _check_columns(self, values):
        unknown = set(values) - self._columns
        if unknown:
            raise ValueError(f"Unknown columns for {self.name}: {', '.join(sorted(unknown))}")

    def select(self, order_by=None, ascending=True, **filters):
        """
        Rows matching every equality filter, optionally ordered by one column.
        """
        self._check_columns(filters)
        with backend_call(f"select {self.name}"):
            query = self.model.query.filter_by(**filters)
            if order_by is not None:
                column = getattr(self.model, order_by)
                query = query.order_by(column.asc() if ascending else column.desc())
            return [instance.to_row() for instance in query.all()]

    def get(self, row_id):
        """The row with this id, or ``None`` when it does not exist"""
        with backend_call(f"get {self.name}"):
            instance = db.session.get(self.model, row_id)
            return instance.to_row() if instance is not None else None

    def insert(self, values):
        self._check_columns(values)
        with backend_call(f"insert {self.name}"):
            instance = self.model(**values)
            db.session.add(instance)
            db.session.commit()
            return instance.to_row()

    def update(self, row_id, values):
        """
        Write only the supplied columns. Returns the updated row, or ``None``
        when no row has this id.
        """
        self._check_columns(values)
        with backend_call(f"update {self.name}"):
            instance = db.session.get(self.model, row_id)
            if instance is None:
                return None
            for column, value in values.items():
                setattr(instance, column, value)
            db.session.commit()
            return instance.to_row()

    def delete(self, row_id):
        """Hard delete. Returns whether a row was removed."""
        with backend_call(f"delete {self.name}"):
            deleted = self.model.query.filter_by(id=row_id).delete(synchronize_session=False)
            db.session.commit()
            return deleted > 0


def dump_record(schema, row):
    """Row dict -> camelCase record, ``None`` passes through"""
    if row is None:
        return None
    return schema.dump(row)


def load_row(schema, record, partial=False):
    """
    camelCase record -> column values. Schema violations are input errors
    and are raised before anything reaches the database.
    """
    try:
        return schema.load(record or {}, partial=partial)
    except ValidationError as err:
        raise InvalidInputError("Invalid record", fields=err.messages) from err
