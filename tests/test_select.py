from jsonbatch import Condition


def test_select_range_and_order(db):
    query = db.select('numbers').fields('n').order_by('n', 'desc').range(5, 3)
    assert str(query) == 'SELECT "n" FROM "numbers" ORDER BY "n" DESC LIMIT 3 OFFSET 5'
    assert query.execute().scalars().all() == [194, 193, 192]


def test_select_distinct(db):
    rows = db.select('test').fields('job').distinct().order_by('job').execute().scalars().all()
    assert rows == ['Drummer', 'Singer', 'Songwriter']


def test_select_with_alias_and_or_group(db):
    query = db.select('test', 't').fields('t.name')
    group = query.condition_group_or().condition('t.age', 25).condition('t.age', 28)
    query.condition(group)
    assert str(query) == (
        'SELECT "t"."name" FROM "test" "t" WHERE '
        '("t"."age" = :db_condition_placeholder_0 OR "t"."age" = :db_condition_placeholder_1)'
    )
    assert sorted(query.execute().scalars().all()) == ['John', 'Ringo']


def test_iter_rows_named(db):
    rows = list(db.select('test').fields('name', 'age').condition('name', 'Paul').iter_rows(named=True))
    assert rows == [{'name': 'Paul', 'age': 26}]


def test_comment_on_select(db):
    query = db.select('numbers').fields('n').condition('n', 1).comment('lookup')
    assert str(query).startswith('/* lookup */ SELECT "n" FROM "numbers"')
    assert query.execute().scalar_one() == 1


def test_delete_with_large_in_list(db, count_rows):
    deleted = db.delete('numbers').condition('n', list(range(0, 200, 2))).execute()
    assert deleted == 100
    assert count_rows('numbers') == 100


def test_delete_shares_placeholders_across_conditions(db):
    query = (
        db.delete('numbers')
        .condition('n', list(range(100)))
        .condition(Condition('OR').condition('label', [f'n{i}' for i in range(60)]).is_null('label'))
    )
    sql, arguments = query.compile()
    assert sql == (
        'DELETE FROM "numbers" WHERE "n" IN (select value from json_each(:db_condition_placeholder_0)) '
        'AND ("label" IN (select value from json_each(:db_condition_placeholder_1)) OR "label" IS NULL)'
    )
    assert query.execute() == 60


def test_delete_everything(db, count_rows):
    assert db.delete('test').execute() == 4
    assert count_rows('test') == 0
