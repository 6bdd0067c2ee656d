"""あしあと（プロフィール訪問履歴）"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List

from . import store


@dataclass(frozen=True)
class Visit:
    user_id: int
    owner_id: int
    date: date
    updated: datetime

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'owner_id': self.owner_id,
            'date': self.date.isoformat(),
            'updated': self.updated.isoformat(),
        }


def record_visit(subject_id, viewer_id, visited_at=None):
    # 自分のページを見たときは残さない
    if subject_id == viewer_id:
        return None
    return store.insert_footprint(subject_id, viewer_id, created_at=visited_at)


def recent_visits(subject_id, limit) -> List[Visit]:
    """同じ人の同じ日の訪問は1件にまとめ、最後の訪問時刻を持たせる"""
    rows = store.grouped_footprints(subject_id, limit)
    return [
        Visit(user_id=row.user_id, owner_id=row.owner_id, date=row.date, updated=row.updated)
        for row in rows
    ]
