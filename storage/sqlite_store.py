"""
SQLite 存储 — 每次写入都在一个事务里完成
"""

import json
import os
import sqlite3
from typing import Dict, List

from agents.errors import StorageError
from storage.base import StorageBackend
from tracker.models import TrackedPaper


class SqliteStorage(StorageBackend):
    """引用监控数据库"""

    def __init__(self, db_path: str = "citations.db"):
        self.db_path = db_path
        try:
            if db_path != ":memory:":
                directory = os.path.dirname(db_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
            self.conn = sqlite3.connect(db_path)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"无法打开数据库 {db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self):
        """创建数据表"""
        cursor = self.conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS tracked_papers (
                position INTEGER NOT NULL,
                paper_id TEXT UNIQUE NOT NULL,
                title TEXT NOT NULL
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS known_titles (
                paper_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                title TEXT NOT NULL,
                PRIMARY KEY (paper_id, title)
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS citation_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                paper_id TEXT NOT NULL,
                entry TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_log_paper ON citation_log(paper_id)')
        self.conn.commit()

    def _write(self, statements):
        """在一个事务里执行多条语句（with conn: 出错自动回滚）"""
        try:
            with self.conn:
                for sql, params in statements:
                    if isinstance(params, list):
                        self.conn.executemany(sql, params)
                    else:
                        self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"数据库写入失败: {e}") from e

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"数据库读取失败: {e}") from e

    # ---- 被追踪论文 ----

    def load_tracked(self) -> List[TrackedPaper]:
        rows = self._query(
            'SELECT paper_id, title FROM tracked_papers ORDER BY position'
        )
        return [TrackedPaper(paper_id=row["paper_id"], title=row["title"]) for row in rows]

    def save_tracked(self, papers: List[TrackedPaper]) -> None:
        self._write([
            ('DELETE FROM tracked_papers', ()),
            ('INSERT INTO tracked_papers (position, paper_id, title) VALUES (?, ?, ?)',
             [(i, p.paper_id, p.title) for i, p in enumerate(papers)]),
        ])

    # ---- 已知标题 ----

    def load_known_titles(self, paper_id: str) -> List[str]:
        rows = self._query(
            'SELECT title FROM known_titles WHERE paper_id = ? ORDER BY position',
            (paper_id,),
        )
        return [row["title"] for row in rows]

    def save_known_titles(self, paper_id: str, titles: List[str]) -> None:
        self._write([
            ('DELETE FROM known_titles WHERE paper_id = ?', (paper_id,)),
            ('INSERT INTO known_titles (paper_id, position, title) VALUES (?, ?, ?)',
             [(paper_id, i, t) for i, t in enumerate(titles)]),
        ])

    # ---- 引用日志 ----

    def append_citation_log(self, paper_id: str, entries: List[Dict]) -> None:
        if not entries:
            return
        self._write([
            ('INSERT INTO citation_log (paper_id, entry) VALUES (?, ?)',
             [(paper_id, json.dumps(e, ensure_ascii=False)) for e in entries]),
        ])

    def load_citation_log(self, paper_id: str) -> List[Dict]:
        rows = self._query(
            'SELECT entry FROM citation_log WHERE paper_id = ? ORDER BY id',
            (paper_id,),
        )
        try:
            return [json.loads(row["entry"]) for row in rows]
        except ValueError as e:
            raise StorageError(f"citation_log 中存在无法解析的记录: {e}") from e

    def close(self):
        self.conn.close()
