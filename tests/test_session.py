from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.session import get_db


def test_get_db_yields_session_and_closes_it():
    gen = get_db()
    db = next(gen)

    assert isinstance(db, Session)
    assert db.execute(text("SELECT 1")).scalar() == 1
    assert db.in_transaction()

    gen.close()

    # close() 후에는 트랜잭션이 남지 않는다
    assert not db.in_transaction()
