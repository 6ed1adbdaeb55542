import re

from ddlforge.hq.compiler import SchemaCompiler
from ddlforge.hq.config import GeneratorConfig
from ddlforge.sql.format import MAX_LINE_LENGTH, format_sql


def test_create_table_layout():
    sql = "CREATE TABLE t (id UUID PRIMARY KEY,   name TEXT NOT NULL)  ;"
    assert format_sql(sql) == (
        "CREATE TABLE t (\n"
        "  id UUID PRIMARY KEY,\n"
        "  name TEXT NOT NULL\n"
        ");"
    )


def test_partition_clause_on_own_line():
    sql = (
        "CREATE TABLE events (\n  id BIGINT,\n  at DATE,\n  PRIMARY KEY (id, at)\n)"
        " PARTITION BY RANGE (at);"
    )
    assert format_sql(sql) == (
        "CREATE TABLE events (\n"
        "  id BIGINT,\n"
        "  at DATE,\n"
        "  PRIMARY KEY (id, at)\n"
        ")\n"
        "PARTITION BY RANGE (at);"
    )


def test_nested_commas_stay_inline():
    sql = "CREATE TABLE p (price DECIMAL(10,2) CHECK (price IN (1, 2)), n INT);"
    assert format_sql(sql) == (
        "CREATE TABLE p (\n"
        "  price DECIMAL(10,2) CHECK (price IN (1, 2)),\n"
        "  n INT\n"
        ");"
    )


def test_statements_separated_by_blank_lines():
    sql = "ALTER TABLE a ENABLE ROW LEVEL SECURITY;\n\n\n\nDROP TABLE IF EXISTS b CASCADE;"
    assert format_sql(sql) == (
        "ALTER TABLE a ENABLE ROW LEVEL SECURITY;\n\nDROP TABLE IF EXISTS b CASCADE;"
    )


def test_quoted_text_untouched():
    sql = "COMMENT ON TABLE t IS 'two  spaces;   (kept)';"
    assert format_sql(sql) == sql
    sql = 'CREATE TABLE "My  Table" (a TEXT DEFAULT \'x ,  y\');'
    assert format_sql(sql) == (
        'CREATE TABLE "My  Table" (\n  a TEXT DEFAULT \'x ,  y\'\n);'
    )


def test_do_block_untouched():
    block = (
        "DO $$\n"
        "BEGIN\n"
        "  IF NOT EXISTS (SELECT 1 FROM pg_constraint WHERE conname = 'c') THEN\n"
        "    ALTER TABLE t ADD CONSTRAINT c CHECK (x > 0);\n"
        "  END IF;\n"
        "END $$;"
    )
    assert format_sql(block) == block
    assert format_sql(f"{block}\nDROP TABLE t;") == f"{block}\n\nDROP TABLE t;"


def test_comments_preserved():
    sql = "-- users table\nCREATE TABLE u (id INT); /* trailing */"
    out = format_sql(sql)
    assert out.startswith("-- users table\nCREATE TABLE u (\n  id INT\n);")
    assert out.endswith("/* trailing */")


def test_long_policy_wrapped():
    sql = (
        "CREATE POLICY tenant_isolation ON documents AS RESTRICTIVE FOR ALL "
        "TO app_user USING (tenant_id = current_setting('app.tenant')::uuid) "
        "WITH CHECK (tenant_id = current_setting('app.tenant')::uuid);"
    )
    assert format_sql(sql) == (
        "CREATE POLICY tenant_isolation ON documents\n"
        "  AS RESTRICTIVE\n"
        "  FOR ALL\n"
        "  TO app_user\n"
        "  USING (tenant_id = current_setting('app.tenant')::uuid)\n"
        "  WITH CHECK (tenant_id = current_setting('app.tenant')::uuid);"
    )


def test_long_foreign_key_wrapped():
    sql = (
        "ALTER TABLE memberships ADD CONSTRAINT fk_memberships_user_id_users_id "
        "FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE SET NULL ON UPDATE CASCADE;"
    )
    assert format_sql(sql) == (
        "ALTER TABLE memberships ADD CONSTRAINT fk_memberships_user_id_users_id\n"
        "  FOREIGN KEY (user_id)\n"
        "  REFERENCES users(id)\n"
        "  ON DELETE SET NULL\n"
        "  ON UPDATE CASCADE;"
    )


def test_short_statements_not_wrapped():
    sql = "CREATE INDEX IF NOT EXISTS idx_t_a ON t USING gin (a) WHERE a IS NOT NULL;"
    assert len(sql) <= MAX_LINE_LENGTH
    assert format_sql(sql) == sql


def test_idempotent():
    sql = (
        "-- header\nCREATE TABLE IF NOT EXISTS orders (id UUID PRIMARY KEY, "
        "status VARCHAR(20) DEFAULT 'a  b') PARTITION BY HASH (id);"
        "CREATE UNIQUE INDEX CONCURRENTLY IF NOT EXISTS idx_orders_status_created_at "
        "ON orders (status, created_at) INCLUDE (total) WHERE status <> 'shipped';"
        "COMMENT ON COLUMN orders.id IS 'Key';"
    )
    once = format_sql(sql)
    assert format_sql(once) == once
    assert "\n  INCLUDE (total)\n  WHERE status <> 'shipped';" in once


def test_empty_input():
    assert format_sql("") == ""
    assert format_sql("   \n ") == ""


def test_tagged_dollar_body_and_escape_strings_untouched():
    sql = (
        "CREATE FUNCTION f() RETURNS text AS $body$ SELECT  'a ;  b' $body$   LANGUAGE sql;"
        "COMMENT ON TABLE t IS E'tab\\t  here';"
    )
    assert format_sql(sql) == (
        "CREATE FUNCTION f() RETURNS text AS $body$ SELECT  'a ;  b' $body$ LANGUAGE sql;"
        "\n\nCOMMENT ON TABLE t IS E'tab\\t  here';"
    )


def test_comment_with_quote_preserved():
    sql = "-- don't split here;\nDROP TABLE IF EXISTS t CASCADE;"
    assert format_sql(sql) == sql


def test_untokenizable_text_returned_unchanged(caplog):
    sql = "COMMENT ON TABLE t IS 'never   closed;"
    assert format_sql(sql) == sql
    assert "Leaving SQL unformatted" in caplog.text


def test_compiled_output_only_changes_whitespace(orders, events):
    compiler = SchemaCompiler(GeneratorConfig(format_sql=False))
    for schema in (orders, events):
        raw = compiler.compile(schema)
        formatted = format_sql(raw)
        assert re.sub(r"\s+", "", formatted) == re.sub(r"\s+", "", raw)
