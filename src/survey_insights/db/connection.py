import sqlite3


def connect(db_path: str) -> sqlite3.Connection:
    # Generous timeout so a long analysis write does not fail a concurrent reader.
    conn = sqlite3.connect(db_path, timeout=60.0)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.row_factory = sqlite3.Row
    return conn
