from types import SimpleNamespace

import pytest
import sqlalchemy as sa

from jsonbatch import BaseDialect, BatchConfig, Connection, SqliteDialect, get_dialect


def test_dialect_selected_by_backend(sqlite_engine):
    assert isinstance(get_dialect(sqlite_engine), SqliteDialect)
    with sqlite_engine.connect() as conn:
        db = Connection(conn)
    assert isinstance(db.dialect, SqliteDialect)
    assert db.database_type == 'sqlite'


def test_postgresql_uses_default_dialect():
    fake = SimpleNamespace(dialect=SimpleNamespace(name='postgresql', driver='psycopg'))
    dialect = get_dialect(fake)
    assert type(dialect) is BaseDialect


def test_unknown_backend():
    fake = SimpleNamespace(dialect=SimpleNamespace(name='mssql', driver='pyodbc'))
    with pytest.raises(NotImplementedError, match='mssql\\+pyodbc'):
        get_dialect(fake)


def test_dialect_receives_config(sqlite_engine):
    config = BatchConfig(condition_list_threshold=10)
    assert get_dialect(sqlite_engine, config).config is config


def test_requires_sqlalchemy_connection(sqlite_engine):
    with pytest.raises(TypeError):
        Connection(sqlite_engine)


@pytest.mark.parametrize('field, expected', [
    ('job', '"job"'),
    ('update', '"update"'),
    ('p.job', '"p"."job"'),
    ('job"; --', '"job"'),
])
def test_escape_field(db, field, expected):
    assert db.escape_field(field) == expected


def test_quote_table_with_prefix(sqlite_engine):
    with sqlite_engine.connect() as conn:
        db = Connection(conn, config=BatchConfig(table_prefix='pre_'))
        assert db.quote_table('people') == '"pre_people"'
        assert db.quote_table('main.people') == '"main"."pre_people"'
        with pytest.raises(ValueError):
            db.quote_table('; --')


def test_prefixed_tables_are_used(sqlite_engine):
    with sqlite_engine.begin() as conn:
        conn.execute(sa.text('CREATE TABLE pre_people (job TEXT PRIMARY KEY, age INTEGER)'))
        db = Connection(conn, config=BatchConfig(table_prefix='pre_'))
        upsert = db.upsert('people').key('job').fields(['job', 'age'])
        for i in range(80):
            upsert.values([f'Job {i}', i])
        upsert.execute()
        assert len(db.select('people').execute().all()) == 80


def test_make_comment(db):
    assert db.make_comment([]) == ''
    assert db.make_comment(['a', 'b']) == '/* a; b */ '
    assert db.make_comment(['x */ DROP']) == '/* x  * / DROP */ '


def test_escape_like(db):
    assert db.escape_like('50%_off\\') == '50\\%\\_off\\\\'


@pytest.mark.parametrize('changes', [
    {'placeholder_ceiling': 0},
    {'condition_list_threshold': -1},
    {'upsert_row_threshold': 1.5},
])
def test_invalid_config(changes):
    with pytest.raises(ValueError):
        BatchConfig(**changes)


def test_config_replace():
    config = BatchConfig().replace(placeholder_ceiling=32766)
    assert config.placeholder_ceiling == 32766
    assert config.upsert_row_threshold == 50
