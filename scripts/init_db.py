import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ledgerapi.config import settings  # noqa: E402
from ledgerapi.database.connection import engine  # noqa: E402
from ledgerapi.models import Base  # noqa: E402


def init_db():
    """데이터베이스 초기화 (테이블/인덱스 생성)"""
    try:
        Base.metadata.create_all(bind=engine)
        print(f"Database initialized successfully: {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    print(f"Initializing database for {settings.APP_NAME}")
    init_db()
