from .session import create_db_engine, init_schema, make_session_factory

__all__ = ["create_db_engine", "init_schema", "make_session_factory"]
