# database/db_manager.py

import sqlite3
import json
import uuid
from pathlib import Path
from typing import Optional, List, Dict, Any
from datetime import datetime
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


class DatabaseManager:
    """Manage SQLite database for the resume tailoring service"""

    def __init__(self, db_path: str = "data/resume_tailor.db"):
        self.db_path = db_path
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist"""
        db_file = Path(self.db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)

        # Read schema
        schema_path = Path(__file__).parent / "schema.sql"
        if not schema_path.exists():
            logger.error(f"Schema file not found: {schema_path}")
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, 'r') as f:
            schema = f.read()

        # Execute schema
        with self.get_connection() as conn:
            conn.executescript(schema)

            # Enable WAL mode for better concurrency
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=30000")

        logger.info(f"Database initialized: {self.db_path}")

    @contextmanager
    def get_connection(self):
        """Context manager for database connections"""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            conn.close()

    def ping(self) -> bool:
        """Check the database answers a trivial query"""
        with self.get_connection() as conn:
            return conn.execute("SELECT 1").fetchone()[0] == 1

    # ========== Users ==========

    @staticmethod
    def _user_from_row(row: sqlite3.Row) -> Dict:
        user = dict(row)
        user['is_pro'] = bool(user['is_pro'])
        return user

    def create_user(self, email: str, password_hash: str, name: Optional[str] = None) -> Dict:
        """Add a new user account"""
        user_id = uuid.uuid4().hex
        with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO users (user_id, email, name, password_hash)
                VALUES (?, ?, ?, ?)
            """, (user_id, email, name, password_hash))

            logger.info(f"Added user: {email} (ID: {user_id})")
            row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
            return self._user_from_row(row)

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Get user by ID"""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()
            return self._user_from_row(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[Dict]:
        """Get user by email"""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = cursor.fetchone()
            return self._user_from_row(row) if row else None

    def list_users(self) -> List[Dict]:
        """List users with their generation counts, newest first"""
        with self.get_connection() as conn:
            cursor = conn.execute("""
                SELECT u.user_id, u.email, u.name, u.is_pro, u.resume_count, u.created_at,
                       COUNT(g.generation_id) AS generation_count
                FROM users u
                LEFT JOIN resume_generations g ON g.user_id = u.user_id
                GROUP BY u.user_id
                ORDER BY u.created_at DESC
            """)
            return [self._user_from_row(row) for row in cursor.fetchall()]

    def set_pro_status(self, user_id: str, is_pro: bool) -> Optional[Dict]:
        """Grant or revoke the paid tier"""
        with self.get_connection() as conn:
            cursor = conn.execute("""
                UPDATE users SET is_pro = ?, updated_at = ?
                WHERE user_id = ?
            """, (int(is_pro), _timestamp(), user_id))

            if cursor.rowcount == 0:
                return None

            logger.info(f"Updated user {user_id} is_pro to: {is_pro}")
            row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
            return self._user_from_row(row)

    def reset_usage(self, user_id: str) -> bool:
        """Set a user's generation counter back to zero"""
        with self.get_connection() as conn:
            cursor = conn.execute("""
                UPDATE users SET resume_count = 0, updated_at = ?
                WHERE user_id = ?
            """, (_timestamp(), user_id))

            if cursor.rowcount:
                logger.info(f"Reset usage counter for user {user_id}")
            return cursor.rowcount > 0

    # ========== Generations ==========

    def record_generation(self, user_id: str, job_description: str, original_resume: str,
                          generated_resume: str, insights: Dict[str, Any], **kwargs) -> int:
        """
        Store a generation and count it against the user's usage

        Both writes share one transaction: either the record exists and the
        counter advanced, or neither happened.
        """
        with self.get_connection() as conn:
            cursor = conn.execute("""
                INSERT INTO resume_generations (
                    user_id, job_description, original_resume, generated_resume,
                    insights, tone, seniority, format, include_cover_letter
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                user_id, job_description, original_resume, generated_resume,
                json.dumps(insights),
                kwargs.get('tone'),
                kwargs.get('seniority'),
                kwargs.get('format'),
                int(kwargs.get('include_cover_letter', False))
            ))
            generation_id = cursor.lastrowid

            cursor = conn.execute("""
                UPDATE users SET resume_count = resume_count + 1, updated_at = ?
                WHERE user_id = ?
            """, (_timestamp(), user_id))

            if cursor.rowcount == 0:
                raise LookupError(f"User not found: {user_id}")

            logger.info(f"Added generation {generation_id} for user {user_id}")
            return generation_id

    @staticmethod
    def _generation_from_row(row: sqlite3.Row) -> Dict:
        result = dict(row)
        result['include_cover_letter'] = bool(result['include_cover_letter'])
        try:
            result['insights'] = json.loads(result['insights']) if result['insights'] else None
        except (TypeError, ValueError):
            logger.warning(f"Malformed insights for generation {result['generation_id']}")
            result['insights'] = None
        return result

    def list_generations(self, user_id: str, limit: int = 10) -> List[Dict]:
        """List a user's most recent generations"""
        with self.get_connection() as conn:
            cursor = conn.execute("""
                SELECT * FROM resume_generations
                WHERE user_id = ?
                ORDER BY created_at DESC, generation_id DESC
                LIMIT ?
            """, (user_id, limit))

            return [self._generation_from_row(row) for row in cursor.fetchall()]

    def get_generation(self, user_id: str, generation_id: int) -> Optional[Dict]:
        """Get one of a user's generations"""
        with self.get_connection() as conn:
            cursor = conn.execute("""
                SELECT * FROM resume_generations
                WHERE generation_id = ? AND user_id = ?
            """, (generation_id, user_id))
            row = cursor.fetchone()
            return self._generation_from_row(row) if row else None

    # ========== Views/Reports ==========

    def get_statistics(self) -> Dict:
        """Get overall statistics"""
        with self.get_connection() as conn:
            stats = {}

            cursor = conn.execute("SELECT COUNT(*) FROM users")
            stats['total_users'] = cursor.fetchone()[0]

            cursor = conn.execute("SELECT COUNT(*) FROM users WHERE is_pro = 1")
            stats['pro_users'] = cursor.fetchone()[0]
            stats['free_users'] = stats['total_users'] - stats['pro_users']

            cursor = conn.execute("SELECT COUNT(*) FROM resume_generations")
            stats['total_generations'] = cursor.fetchone()[0]

            cursor = conn.execute("""
                SELECT COUNT(*) FROM users
                WHERE created_at >= datetime('now', '-7 days')
            """)
            stats['recent_users'] = cursor.fetchone()[0]

            cursor = conn.execute("""
                SELECT COUNT(*) FROM resume_generations
                WHERE created_at >= datetime('now', '-7 days')
            """)
            stats['recent_generations'] = cursor.fetchone()[0]

            total = stats['total_users']
            stats['conversion_rate'] = round(stats['pro_users'] / total * 100, 2) if total else 0
            stats['avg_generations_per_user'] = round(stats['total_generations'] / total, 2) if total else 0

            return stats
