from sqlalchemy import inspect, text

from .db import Database

SCHEMA_PRIVILEGES = text("""
    SELECT schema_name,
           has_schema_privilege(current_user, schema_name, 'usage') AS has_usage,
           has_schema_privilege(current_user, schema_name, 'create') AS has_create
    FROM information_schema.schemata
    WHERE schema_name = 'public'
""")

TABLE_PRIVILEGES = text("""
    SELECT table_name,
           has_table_privilege(current_user, table_name, 'SELECT') AS has_select,
           has_table_privilege(current_user, table_name, 'INSERT') AS has_insert,
           has_table_privilege(current_user, table_name, 'UPDATE') AS has_update,
           has_table_privilege(current_user, table_name, 'DELETE') AS has_delete
    FROM information_schema.tables
    WHERE table_schema = 'public'
""")


def check_connection(database: Database) -> dict:
    """Connect once and report what the configured user can see and do.

    On PostgreSQL this includes schema and table privileges for ``public``;
    other dialects only report the database name and visible tables.
    Connection errors propagate to the caller.
    """
    report: dict = {"dialect": database.engine.dialect.name}
    with database.engine.connect() as conn:
        if report["dialect"] == "postgresql":
            report["database"] = conn.execute(text("SELECT current_database()")).scalar()
            schema = conn.execute(SCHEMA_PRIVILEGES).mappings().first()
            report["schema_privileges"] = dict(schema) if schema else None
            report["table_privileges"] = [dict(r) for r in conn.execute(TABLE_PRIVILEGES).mappings()]
        else:
            conn.execute(text("SELECT 1"))
            report["database"] = database.engine.url.database
            report["tables"] = sorted(inspect(conn).get_table_names())
    return report
