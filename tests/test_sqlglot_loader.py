"""
Tests for the sqlglot loader.
"""
import pytest

from sqlgutter.loaders import SqlglotLoader, SqlParseError
from sqlgutter.models import (
    AggregateCall,
    Between,
    BinaryOp,
    Cast,
    CastSyntax,
    ColumnRef,
    DerivedTable,
    Exists,
    InPredicate,
    Insert,
    KeywordLiteral,
    Select,
    StringLiteral,
    TableRef,
    UnsupportedStatement,
    Update,
)


@pytest.fixture
def loader():
    return SqlglotLoader("postgres")


def _one(loader, sql):
    statements = loader.load(sql)
    assert len(statements) == 1
    return statements[0]


class TestQueries:
    """Test SELECT conversion."""

    def test_columns_and_table(self, loader):
        """Test a simple SELECT."""
        select = _one(loader, "select id, name as n from users u")
        assert isinstance(select, Select)
        assert [c.expression for c in select.columns] == [ColumnRef("id"), ColumnRef("name")]
        assert select.columns[1].alias == "n"
        assert select.from_items[0].source == TableRef("users", "u")

    def test_join(self, loader):
        """Test that a join keeps its keyword text and condition."""
        select = _one(loader, "select 1 from a left join b on a.id = b.id and b.x = 1")
        join = select.from_items[1]
        assert join.join == "LEFT JOIN"
        assert isinstance(join.on, BinaryOp) and join.on.operator == "AND"

    def test_comma_join(self, loader):
        """Test FROM a, b."""
        select = _one(loader, "select 1 from a, b")
        assert [item.join for item in select.from_items] == [None, None]
        assert select.from_items[1].source == TableRef("b")

    def test_limit_offset(self, loader):
        """Test LIMIT with OFFSET."""
        select = _one(loader, "select a from t limit 10 offset 5")
        assert select.limit.count.value == "10"
        assert select.limit.offset.value == "5"

    def test_union_all(self, loader):
        """Test the set-operation chain."""
        select = _one(loader, "select a from t union all select a from u")
        assert select.set_op == "UNION ALL"
        assert select.next.from_items[0].source == TableRef("u")

    def test_cte(self, loader):
        """Test a WITH clause."""
        select = _one(loader, "with c as (select a from t) select a from c")
        assert select.with_clause.ctes[0].name == "c"
        assert isinstance(select.with_clause.ctes[0].statement, Select)

    def test_derived_table(self, loader):
        """Test a subquery in FROM."""
        select = _one(loader, "select x from (select x from t) sub")
        source = select.from_items[0].source
        assert isinstance(source, DerivedTable)
        assert source.alias == "sub"

    def test_multiple_statements(self, loader):
        """Test that every statement is returned."""
        assert len(loader.load("select 1; select 2")) == 2


class TestExpressions:
    """Test expression conversion."""

    def test_is_not_null(self, loader):
        """Test that NOT around IS reads as IS NOT."""
        where = _one(loader, "select a from t where a is not null").where
        assert isinstance(where, BinaryOp)
        assert where.operator == "IS NOT"

    @pytest.mark.parametrize("sql,operator", [
        ("select a from t where a not like 'x%'", "NOT LIKE"),
        ("select a from t where a not ilike 'x%'", "NOT ILIKE"),
        ("select a from t where a like 'x%'", "LIKE"),
        ("select a from t where a is null", "IS"),
    ])
    def test_negated_pattern_operators(self, loader, sql, operator):
        """Test that negation on LIKE / ILIKE / IS is never dropped."""
        where = _one(loader, sql).where
        assert isinstance(where, BinaryOp)
        assert where.operator == operator

    def test_not_in(self, loader):
        """Test NOT IN."""
        where = _one(loader, "select a from t where a not in (1, 2)").where
        assert isinstance(where, InPredicate)
        assert where.negated
        assert len(where.items) == 2

    def test_in_subquery(self, loader):
        """Test IN (subquery)."""
        where = _one(loader, "select a from t where a in (select b from u)").where
        assert isinstance(where, InPredicate)
        assert isinstance(where.subquery, Select)

    def test_not_between(self, loader):
        """Test NOT BETWEEN."""
        where = _one(loader, "select a from t where a not between 1 and 5").where
        assert isinstance(where, Between)
        assert where.negated

    def test_not_exists(self, loader):
        """Test NOT EXISTS."""
        where = _one(loader, "select a from t where not exists (select 1 from u)").where
        assert isinstance(where, Exists)
        assert where.negated

    def test_count_distinct(self, loader):
        """Test COUNT(DISTINCT x)."""
        call = _one(loader, "select count(distinct x) from t").columns[0].expression
        assert isinstance(call, AggregateCall)
        assert call.distinct
        assert call.args == [ColumnRef("x")]

    def test_bare_keyword_function(self, loader):
        """Test that CURRENT_DATE is kept as a keyword."""
        value = _one(loader, "select current_date").columns[0].expression
        assert value == KeywordLiteral("CURRENT_DATE")

    def test_cast(self, loader):
        """Test CAST conversion."""
        value = _one(loader, "select cast(a as int) from t").columns[0].expression
        assert isinstance(value, Cast)
        assert value.expression == ColumnRef("a")

    def test_double_colon_cast_uses_call_syntax(self, loader):
        """Test that a::text becomes a call-syntax Cast (sqlglot does not record ::)."""
        value = _one(loader, "select a::text from t").columns[0].expression
        assert isinstance(value, Cast)
        assert value.syntax is CastSyntax.CALL
        assert value.target_type == "TEXT"

    def test_escaped_string(self, loader):
        """Test that an escaped quote stays escaped."""
        value = _one(loader, "select 'it''s'").columns[0].expression
        assert value == StringLiteral("it''s")


class TestDml:
    """Test UPDATE / INSERT conversion."""

    def test_update(self, loader):
        """Test assignments and WHERE."""
        update = _one(loader, "update t set a = 1, b = 2 where id = 3")
        assert isinstance(update, Update)
        assert [a.column for a in update.assignments] == ["a", "b"]
        assert update.where is not None

    def test_insert_values(self, loader):
        """Test INSERT with a column list and two rows."""
        insert = _one(loader, "insert into t (a, b) values (1, 2), (3, 4)")
        assert isinstance(insert, Insert)
        assert insert.columns == ["a", "b"]
        assert len(insert.rows) == 2

    def test_insert_select(self, loader):
        """Test INSERT ... SELECT."""
        insert = _one(loader, "insert into t select a from u")
        assert isinstance(insert.select, Select)

    def test_other_statements_are_kept_as_text(self, loader):
        """Test that statements without layout keep sqlglot's text."""
        statement = _one(loader, "create table t (a int)")
        assert isinstance(statement, UnsupportedStatement)
        assert statement.kind == "CREATE"
        assert statement.text.upper().startswith("CREATE TABLE")


class TestErrors:
    """Test parse failures."""

    def test_unbalanced_parenthesis(self, loader):
        """Test that sqlglot errors become SqlParseError with a position."""
        with pytest.raises(SqlParseError) as excinfo:
            loader.load("select (1 from t")
        assert excinfo.value.line is not None

    def test_distinct_on_is_rejected(self, loader):
        """Test that DISTINCT ON cannot be dropped silently."""
        with pytest.raises(SqlParseError, match="Unsupported DISTINCT ON"):
            loader.load("select distinct on (a) a, b from t")
