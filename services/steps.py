from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db

def run_best_effort(name: str, fn, warnings: list):
    """
    Runs one follow-up step of a multi-step workflow and commits it on its own.

    A failing step is rolled back alone, logged, and recorded in ``warnings``;
    steps that already committed stay committed.
    """
    try:
        result = fn()
        db.session.commit()
        return result
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Best-effort step failed: %s", name)
        warnings.append(f"{name} failed")
        return None
