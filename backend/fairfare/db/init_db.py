"""
Database initialization script.
"""
from fairfare.db.session import default_engines, init_cache_db, init_db

if __name__ == "__main__":
    store_engine, cache_engine = default_engines()
    print("Initializing remote store and local cache...")
    init_db(store_engine)
    init_cache_db(cache_engine)
    print("Database initialized successfully!")
