"""
JSON 文件存储 — 写临时文件再 os.replace，进程崩溃也不会留下写了一半的文件
"""

import json
import os
import tempfile
from typing import Any, Dict, List

from agents.errors import StorageError
from storage.base import StorageBackend
from tracker.models import TrackedPaper


class JsonFileStorage(StorageBackend):
    """
    文件布局（data_dir 下）:
        tracked_papers.json              [{"paperId": ..., "title": ...}, ...]
        known_titles_<id>.json           ["title", ...]
        new_citations_log_<id>.jsonl     每行一条新引用记录
    """

    TRACKED_FILE = "tracked_papers.json"

    def __init__(self, data_dir: str = "data"):
        self.data_dir = data_dir

    # ------------------------------------------------------------------
    # 文件工具
    # ------------------------------------------------------------------

    def _path(self, name: str) -> str:
        return os.path.join(self.data_dir, name)

    def _known_titles_path(self, paper_id: str) -> str:
        return self._path(f"known_titles_{paper_id}.json")

    def _log_path(self, paper_id: str) -> str:
        return self._path(f"new_citations_log_{paper_id}.jsonl")

    def _read_json(self, path: str, default: Any) -> Any:
        if not os.path.exists(path):
            return default
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except ValueError as e:
            raise StorageError(f"{path} 不是合法 JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"无法读取 {path}: {e}") from e

    def _write_json(self, path: str, data: Any):
        """原子写入：同目录临时文件 + os.replace"""
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=".tmp_", suffix=".json", dir=self.data_dir,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"无法写入 {path}: {e}") from e

    # ------------------------------------------------------------------
    # 被追踪论文
    # ------------------------------------------------------------------

    def load_tracked(self) -> List[TrackedPaper]:
        path = self._path(self.TRACKED_FILE)
        data = self._read_json(path, [])
        if not isinstance(data, list):
            raise StorageError(f"{path} 格式错误：应为列表")
        try:
            return [TrackedPaper.from_dict(entry) for entry in data]
        except (KeyError, TypeError) as e:
            raise StorageError(f"{path} 中存在格式错误的条目: {e}") from e

    def save_tracked(self, papers: List[TrackedPaper]) -> None:
        self._write_json(
            self._path(self.TRACKED_FILE), [p.to_dict() for p in papers],
        )

    # ------------------------------------------------------------------
    # 已知标题
    # ------------------------------------------------------------------

    def load_known_titles(self, paper_id: str) -> List[str]:
        path = self._known_titles_path(paper_id)
        data = self._read_json(path, [])
        if not isinstance(data, list) or not all(isinstance(t, str) for t in data):
            raise StorageError(f"{path} 格式错误：应为字符串列表")
        return data

    def save_known_titles(self, paper_id: str, titles: List[str]) -> None:
        self._write_json(self._known_titles_path(paper_id), list(titles))

    # ------------------------------------------------------------------
    # 引用日志（JSON Lines，只追加）
    # ------------------------------------------------------------------

    def append_citation_log(self, paper_id: str, entries: List[Dict]) -> None:
        if not entries:
            return
        path = self._log_path(paper_id)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                for entry in entries:
                    f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            raise StorageError(f"无法追加 {path}: {e}") from e

    def load_citation_log(self, paper_id: str) -> List[Dict]:
        path = self._log_path(paper_id)
        if not os.path.exists(path):
            return []
        entries = []
        try:
            with open(path, encoding="utf-8") as f:
                for lineno, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(json.loads(line))
                    except ValueError as e:
                        raise StorageError(f"{path} 第 {lineno} 行无法解析: {e}") from e
        except OSError as e:
            raise StorageError(f"无法读取 {path}: {e}") from e
        return entries
