import pytest
import sqlalchemy as sa

from jsonbatch import Connection


@pytest.fixture()
def sqlite_engine():
    eng = sa.create_engine('sqlite:///:memory:')
    meta = sa.MetaData()

    t_people = sa.Table(
        'test_people', meta,
        sa.Column('name', sa.String, nullable=False, server_default=''),
        sa.Column('age', sa.Integer, nullable=False, server_default='0'),
        sa.Column('job', sa.String, primary_key=True),
    )

    t_test = sa.Table(
        'test', meta,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String, unique=True),
        sa.Column('age', sa.Integer),
        sa.Column('job', sa.String, server_default='Undefined'),
    )

    # table and column named after keywords
    t_select = sa.Table(
        'select', meta,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('update', sa.String),
    )

    t_numbers = sa.Table(
        'numbers', meta,
        sa.Column('n', sa.Integer, primary_key=True),
        sa.Column('label', sa.String),
    )

    meta.create_all(eng)

    with eng.begin() as conn:
        conn.execute(t_people.insert(), [{'name': 'Meredith', 'age': 30, 'job': 'Speaker'}])
        conn.execute(t_test.insert(), [
            {'name': 'John', 'age': 25, 'job': 'Singer'},
            {'name': 'George', 'age': 27, 'job': 'Singer'},
            {'name': 'Ringo', 'age': 28, 'job': 'Drummer'},
            {'name': 'Paul', 'age': 26, 'job': 'Songwriter'},
        ])
        conn.execute(t_select.insert(), [{'id': 1, 'update': 'Update value 1'}])
        conn.execute(t_numbers.insert(), [{'n': i, 'label': f'n{i}'} for i in range(200)])

    yield eng


@pytest.fixture()
def db(sqlite_engine):
    with sqlite_engine.begin() as conn:
        yield Connection(conn)


@pytest.fixture()
def count_rows(db):
    def _count(table):
        return db.query(f'SELECT COUNT(*) FROM {db.quote_table(table)}').scalar_one()
    return _count
