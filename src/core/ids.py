"""
ID 생성: run_id, 템플릿 저장 키

규칙:
- run_id는 렌더 호출마다 새로 발급
- 저장 키는 템플릿 name에서 결정론적으로 유도 (파일명 안전)
"""

import hashlib
import uuid
from datetime import UTC, datetime


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"


def template_storage_key(name: str) -> str:
    """
    템플릿 name → 저장 파일명 키.

    name에는 공백, 슬래시 등 임의 문자가 올 수 있으므로
    SHA-256 hex로 변환해 파일명으로 사용.

    Args:
        name: 템플릿 name

    Returns:
        64자 hex 문자열
    """
    return hashlib.sha256(name.encode("utf-8")).hexdigest()
